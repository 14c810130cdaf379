#!/usr/bin/env python
import sys
import json
import argparse
from argparse import RawTextHelpFormatter
from typing import Any, Dict

import yaml

import rteman
from rteman.config import ProjectConfig
from rteman.exceptions import RtemanError
from rteman.loggers.logger import set_verbosity
from rteman.manager import RuntimeEnvironmentManager
from rteman.runtime import Registry, list_environments
from rteman.utils.environment import detect_execution_context
from rteman.validation import CommandInput, parse_locators

OUTPUT_FORMATS = ('yaml', 'json')


def parse_args():

    parser = argparse.ArgumentParser(
        prog='rteman',
        description=(
            f"rteman version {rteman.metadata.version}\n"
            "List and switch the runtime environments of a project\n"
            "\n"
            "usage example\n"
            "\n"
            "   list\n"
            "       # list the runtime environments available in the project\n"
            "       $ rteman list\n"
            "       $ rteman list --format=json\n"
            "\n"
            "   switch\n"
            "       # switch the project to the ddev runtime environment\n"
            "       $ rteman switch ddev\n"
            "\n"
            "   config export\n"
            "       # dump the loaded configuration\n"
            "       $ rteman config export\n"
        ),
        formatter_class=RawTextHelpFormatter
    )

    parser.add_argument(
        '--conf',
        type=str,
        help='the configuration file (default: rteman.yml in the current '
             'directory or one of its parents)',
        dest='conf',
        default=None
    )

    parser.add_argument(
        '--project-root',
        type=str,
        help='the project root (default: the directory of the configuration file)',
        dest='project_root',
        default=None
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='increase the log verbosity (-vv for debug output)'
    )

    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='only log errors'
    )

    parser.add_argument(
        '--version',
        action='count',
        default=0,
        help='display the version and exit'
    )

    subparsers = parser.add_subparsers(help="sub-commands for rteman")

    #
    # sub parser for listing the runtime environments
    #
    parser_list = subparsers.add_parser(
        'list', help='list the available runtime environments')
    parser_list.set_defaults(func=rte_list)
    parser_list.add_argument(
        '--format',
        type=str,
        choices=OUTPUT_FORMATS,
        help='the output format',
        dest='format',
        default='yaml'
    )

    #
    # sub parser for switching to a runtime environment
    #
    parser_switch = subparsers.add_parser(
        'switch', help='switch to a runtime environment')
    parser_switch.set_defaults(
        func=rte_switch,
        arguments=('rte_id',),
        rte_locators='argument.rte_id',
    )
    parser_switch.add_argument(
        'rte_id',
        type=str,
        help='the id of the runtime environment, see: rteman list',
    )

    #
    # sub parser for the 'config' subcommand
    #
    parser_conf = subparsers.add_parser('config', help='inspect the configuration')

    subparsers_conf = parser_conf.add_subparsers(
        help="sub-commands for rteman config")

    #
    # sub parser for the 'config export' subsubcommand
    #
    parser_conf_export = subparsers_conf.add_parser(
        'export', help='dump the loaded configuration')
    parser_conf_export.set_defaults(func=config_export)
    parser_conf_export.add_argument(
        '--format',
        type=str,
        choices=OUTPUT_FORMATS,
        help='the output format',
        dest='format',
        default='yaml'
    )

    return parser


def dump(data: Any, fmt: str = 'yaml') -> str:
    """
    Serialize *data* for the terminal.

    :param data: The data to be serialized
    :param fmt: One of 'yaml' or 'json'
    """
    if fmt == 'json':
        return json.dumps(data, indent=2, default=str) + '\n'
    if not data:
        return '{}\n'
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def command_input(cli_args) -> CommandInput:
    """
    Split the parsed cli arguments into positional arguments and options.

    The sub parsers name their positional arguments through the
    ``arguments`` default, everything else counts as an option.
    """
    values = vars(cli_args)
    positionals = set(values.get('arguments') or ())
    return CommandInput(
        arguments={k: v for k, v in values.items() if k in positionals},
        options={k: v for k, v in values.items() if k not in positionals},
    )


def rte_list(manager: RuntimeEnvironmentManager, cli_args,
             registry: Registry) -> int:
    """
    Print the available runtime environments ordered by weight

    :param manager: The runtime environment manager
    :param cli_args: The parsed arguments from the cli
    :param registry: The registry built for this invocation
    """
    data: Dict[str, Any] = {
        rte.id: rte.as_dict() for rte in list_environments(registry)
    }
    sys.stdout.write(dump(data, cli_args.format))
    return 0


def rte_switch(manager: RuntimeEnvironmentManager, cli_args,
               registry: Registry) -> int:
    """
    Switch to the runtime environment given on the cli

    The gate in main() has checked the id already; the manager checks it
    again against the registry so that an empty id is rejected too.

    :param manager: The runtime environment manager
    :param cli_args: The parsed arguments from the cli
    :param registry: The registry built for this invocation
    """
    return manager.switch(cli_args.rte_id, registry)


def config_export(manager: RuntimeEnvironmentManager, cli_args,
                  registry: Registry) -> int:
    """
    Print the loaded configuration together with where it was loaded from

    :param manager: The runtime environment manager
    :param cli_args: The parsed arguments from the cli
    :param registry: The registry built for this invocation
    """
    data = {
        'conf_path': manager.config.conf_path,
        'project_root': manager.config.project_root,
        'execution_context': detect_execution_context().as_dict(),
        'config': manager.config.data,
    }
    sys.stdout.write(dump(data, cli_args.format))
    return 0


def main(argv=None) -> int:

    arg_parser = parse_args()
    args = arg_parser.parse_args(argv)

    if args.version:
        print(f'v{rteman.metadata.version}')
        return 0

    if not hasattr(args, 'func'):
        arg_parser.print_help()
        return 1

    set_verbosity(args.verbose, args.quiet)

    try:
        config = ProjectConfig(
            conf_path=args.conf, project_root=args.project_root)
        manager = RuntimeEnvironmentManager(config=config)
        registry = manager.registry()

        # commands that take runtime environment ids name their locators,
        # the ids are validated before the command runs
        locators = getattr(args, 'rte_locators', None)
        if locators:
            manager.validate(
                parse_locators(locators), command_input(args), registry)

        return args.func(manager, args, registry)
    except RtemanError as exc:
        # unknown ids (ValidationError) end up here too
        rteman.log.error(str(exc))
        return 1


if __name__ == '__main__':
    sys.exit(main())
