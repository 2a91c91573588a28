import sys

from rich.console import Console
from rich.pretty import pprint

from optset import *

__prog__ = "optset-demo"

verbosity = 0
defines = {}
shown = False

options = OptionSet(shell=True)


@options.option("v|verbose", "increase the verbosity")
def verbose(name):
    global verbosity
    verbosity += 1


@options.option("D|define=", "define a NAME=VALUE symbol", type=(str, int), separators=("=",))
def define(name, value):
    defines[name] = value


@options.option("h|?|help", "show this help text")
def show_help(name):
    global shown
    shown = True


if __name__ == '__main__':
    operands = invoke(options)
    if shown:
        Console().print(options)
        sys.exit(0)
    pprint({"verbosity": verbosity, "defines": defines, "operands": operands})
