import sys

from rich.pretty import pprint

from argsmith import *

parser = ArgParser("argsmith-demo", fancy=True)
parser.add_help()
parser.add_flag("-v", "--verbose", descr="print every stored argument")
parser.add_int_argument("-t", "--threads", descr="worker threads").minimum(1).default(4)
parser.add_float_argument("-r", "--ratio", descr="sampling ratio").default(1.0)
parser.add_string_argument("-o", "--output", descr="output file").default("-")
parser.add_string_argument("--inputs", descr="input files").positional().multivalue()


if __name__ == '__main__':
    if not parser.parse():
        sys.exit(1)
    if parser.help_requested:
        parser.print_help()
        sys.exit(0)
    if parser.get_flag("verbose"):
        pprint(parser)
    pprint({
        "threads": parser.get_int("threads"),
        "ratio": parser.get_float("ratio"),
        "output": parser.get_string("output"),
        "inputs": parser.get_values("inputs"),
    })
