""" Tool to check, convert and walk dialog markup files """

import sys
import argparse
import contextlib
import logging
from typing import List, Optional, Tuple

from dialogtree import core, parser, printer, dialog, config, util

def parse_path(path:str) -> List[int]:
    if path == "":
        return []
    try:
        return [int(x) for x in path.split(",")]
    except ValueError as e:
        raise ValueError(f'path must be comma separated child indexes, got "{path}"') from e

def parse_karma_limits(limits:Optional[str]) -> Optional[Tuple[int, int]]:
    if limits is None:
        return None
    low, _, high = limits.partition(",")
    try:
        return (int(low), int(high))
    except ValueError as e:
        raise ValueError(f'karma limits must be "min,max", got "{limits}"') from e

def main() -> None:
    logging.basicConfig(stream=sys.stderr, level=logging.INFO)
    logging.captureWarnings(True)
    logger = logging.getLogger(__name__)

    with contextlib.ExitStack() as context_stack:

        arg_parser = argparse.ArgumentParser(description="parse a dialog file and print it back, as markup, yaml or graphviz dot")
        arg_parser.add_argument("-i", "--input", nargs="?", type=str, default="-",
                help="dialog markup file, \"-\" for stdin. default \"-\"")
        arg_parser.add_argument("-o", "--output", nargs="?", type=str, default="-",
                help="file to write output to, \"-\" for stdout. default \"-\"")
        arg_parser.add_argument("-f", "--format", choices=["text", "yaml", "dot"], default="text",
                help="output format. default text")
        arg_parser.add_argument("-c", "--config", type=str, default=None,
                help="toml file overriding the built-in settings")
        arg_parser.add_argument("-w", "--world-event", action="append", default=[],
                help="allowed world event, can be repeated")
        arg_parser.add_argument("-t", "--trigger-event", action="append", default=[],
                help="allowed trigger event, can be repeated")
        arg_parser.add_argument("-k", "--karma-limits", type=str, default=None,
                help="karma bounds used for MIN/MAX as \"min,max\"")
        arg_parser.add_argument("-p", "--path", type=str, default="",
                help="comma separated child indexes to dive into before printing")
        arg_parser.add_argument("--pdb", action="store_true")

        args = arg_parser.parse_args()

        if args.pdb:
            context_stack.enter_context(util.PDBManager())

        if args.config:
            with open(args.config, "rt") as config_file:
                config.load_config(config_file)

        settings_infos = core.DialogCustomInfos.from_settings()
        karma_limits = parse_karma_limits(args.karma_limits)
        infos = core.DialogCustomInfos(
            settings_infos.world_event | set(args.world_event),
            karma_limits if karma_limits is not None else settings_infos.karma_limits,
            settings_infos.trigger_event | set(args.trigger_event),
        )
        logger.debug(f'parsing with {infos}')

        if args.input == "-":
            fin = sys.stdin
        else:
            fin = context_stack.enter_context(open(args.input, "rt"))

        if args.output == "-":
            fout = sys.stdout
        else:
            fout = context_stack.enter_context(open(args.output, "wt"))

        try:
            node = parser.load(fin, infos)
        except parser.ParseError as e:
            logger.error(f'could not parse {args.input}: {e}')
            sys.exit(1)

        for child_index in parse_path(args.path):
            if child_index < 0 or child_index >= len(node.children):
                logger.error(f'no child {child_index} under {node.author}, it has {len(node.children)}')
                sys.exit(1)
            node = node.children[child_index]

        if args.format == "text":
            fout.write(printer.print_file(node))
        elif args.format == "yaml":
            fout.write(dialog.dumps(dialog.from_tree(node)))
        else:
            fout.write(node.viz().source)

        logger.info(f'{sum(1 for _ in node.iter_nodes())} nodes')

if __name__ == "__main__":
    main()
