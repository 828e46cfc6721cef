#!/usr/bin/env python3
"""
KUBESELECT CLI
--------------
Command line surface over the selection builder:
  * get            - resolve files, URLs, stdin, selectors or type/name
                     arguments and print the resulting resources.
  * api-resources  - list the resource types the registry knows.

Author: KubeSelect Team
Date: 2026-10-18
"""

import sys
import logging
import argparse
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kubeselect.cli.formatter import SelectionFormatter
from kubeselect.client.rest import KubernetesClientFactory
from kubeselect.core.builder import SelectionBuilder
from kubeselect.core.errors import SelectionError
from kubeselect.core.info import Info
from kubeselect.core.locator import ResourceLocator
from kubeselect.core.registry import TypeRegistry

# Global console for consistent styling across the application
console = Console()

logger = logging.getLogger("kubeselect.cli")


class KubeSelectCLI:
    """
    CLI wrapper that translates flags into SelectionBuilder calls and
    renders the Result.
    """

    def __init__(self, client_factory=None):
        """`client_factory` overrides the kubeconfig based factory (tests)."""
        self.client_factory = client_factory
        self.parser = argparse.ArgumentParser(
            prog="kubeselect",
            description="KubeSelect - resolve files, selectors and type/name arguments into cluster resources",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version="kubeselect v1.0.0")
        self.parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
        self.parser.add_argument("--catalog", help="JSON catalog of extra resource types")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        get_parser = subparsers.add_parser("get", help="Resolve and print resources")
        get_parser.add_argument("args", nargs="*", help="TYPE[,TYPE...] | TYPE NAME [NAME...] | TYPE/NAME [TYPE/NAME...]")
        get_parser.add_argument("-f", "--filename", action="append", default=[],
                                help="File, directory, URL, or '-' for stdin (repeatable)")
        get_parser.add_argument("-l", "--selector", default="", help="Label selector, e.g. app=web,tier!=db")
        get_parser.add_argument("--all", dest="select_all", action="store_true", help="Select all resources of the types")
        get_parser.add_argument("-n", "--namespace", default="default", help="Namespace to operate in")
        get_parser.add_argument("--default-namespace", action="store_true",
                                help="Fill the namespace of objects that have none")
        get_parser.add_argument("--require-namespace", action="store_true",
                                help="Fail when an object names a different namespace")
        get_parser.add_argument("--flatten", action="store_true",
                                help="Split lists from files into their items (always on for server-side input)")
        get_parser.add_argument("--latest", action="store_true", help="Fetch the server copy of every object")
        get_parser.add_argument("--continue-on-error", action="store_true",
                                help="Visit as many resources as possible and report all errors")
        get_parser.add_argument("--single-type", action="store_true", help="Reject more than one resource type")
        get_parser.add_argument("-o", "--output", choices=["table", "name", "yaml", "json"], default="table")
        get_parser.add_argument("--kubeconfig", help="Path to the kubeconfig file")
        get_parser.add_argument("--context", help="Kubeconfig context to use")

        subparsers.add_parser("api-resources", help="List known resource types")

    def _registry(self, args: argparse.Namespace) -> TypeRegistry:
        if args.catalog:
            return TypeRegistry.from_catalog(args.catalog)
        return TypeRegistry.builtin()

    def build(self, args: argparse.Namespace) -> SelectionBuilder:
        """Maps parsed flags onto a SelectionBuilder."""
        factory = self.client_factory or KubernetesClientFactory(args.kubeconfig, args.context)
        locator = ResourceLocator(self._registry(args), factory)

        builder = (
            SelectionBuilder(locator)
            .namespace_param(args.namespace)
            .filename_param(*args.filename)
            .selector_param(args.selector)
            .select_all_param(args.select_all)
            .resource_type_or_name_args(True, *args.args)
        )
        if args.default_namespace:
            builder.default_namespace()
        if args.require_namespace:
            builder.require_namespace()
        # Server-side lists are always shown item by item
        if args.flatten or not args.filename:
            builder.flatten()
        # Objects named on the command line are fetched when first read
        if args.latest or not args.filename:
            builder.latest()
        if args.continue_on_error:
            builder.continue_on_error()
        if args.single_type:
            builder.single_resource_type()
        return builder

    def _run_get(self, args: argparse.Namespace) -> int:
        formatter = SelectionFormatter(args.output)
        try:
            result = self.build(args).do()
        except SelectionError as e:
            formatter.print_error(e)
            return 1

        infos: List[Info] = []
        error: Optional[SelectionError] = None
        try:
            result.visit(infos.append)
        except SelectionError as e:
            error = e

        try:
            if infos:
                formatter.render(infos)
        except SelectionError as e:
            error = error or e

        if error is not None:
            formatter.print_error(error)
            return 1
        if not infos:
            console.print("[bold yellow]No resources found.[/bold yellow]")
        return 0

    def _run_api_resources(self, args: argparse.Namespace) -> int:
        try:
            registry = self._registry(args)
        except SelectionError as e:
            SelectionFormatter().print_error(e)
            return 1

        table = Table(title="API Resources", header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Short Names")
        table.add_column("API Version")
        table.add_column("Namespaced", justify="center")
        table.add_column("Kind", style="bold")
        for entry in registry.entries():
            table.add_row(
                entry.resource, ",".join(entry.short_names), entry.api_version,
                "true" if entry.namespaced else "false", entry.kind,
            )
        console.print(table)
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point; returns the process exit code."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(level=max(logging.DEBUG, logging.WARNING - 10 * args.verbose))

        if args.command == "get":
            return self._run_get(args)
        if args.command == "api-resources":
            return self._run_api_resources(args)

        console.print(Panel.fit("[bold cyan]KubeSelect v1.0.0[/bold cyan]", border_style="cyan"))
        self.parser.print_help()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeSelectCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
