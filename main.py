from rich.pretty import pprint

from aargs import *


def callback(aargs):
    pprint(aargs)


if __name__ == '__main__':
    invoke(Aargs(prologue=["mode"], epilogue="files", flag_configs={
        "debug": {"type": "boolean", "help": "print the bound values"},
        "output": "where to write",
    }, aliases={"d": "debug"}), callback)
