# src/kubeselect/cli/formatter.py
import json
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from kubeselect.cli.exporter import ObjectExporter
from kubeselect.core.errors import AggregateError
from kubeselect.core.info import Info

# Initialize the Rich console for high-quality terminal output
console = Console()
err_console = Console(stderr=True)


class SelectionFormatter:
    """
    Renders resolved resources in the output format picked on the
    command line: table, name, yaml or json.
    """

    def __init__(self, output: str = "table"):
        self.output = output
        self.exporter = ObjectExporter()

    def render(self, infos: List[Info]):
        if self.output == "name":
            self.print_names(infos)
        elif self.output == "yaml":
            self.print_yaml(infos)
        elif self.output == "json":
            self.print_json(infos)
        else:
            self.print_table(infos)

    def print_table(self, infos: List[Info]):
        table = Table(title="Resolved Resources", show_header=True, header_style="bold magenta")
        table.add_column("Kind", style="cyan")
        table.add_column("Namespace")
        table.add_column("Name", style="bold")
        table.add_column("Version", style="dim")
        table.add_column("Source", style="dim")

        for info in infos:
            table.add_row(
                info.mapping.kind,
                info.namespace or "-",
                info.name or "-",
                info.resource_version or "-",
                info.source or "server",
            )
        console.print(table)

    def print_names(self, infos: List[Info]):
        for info in infos:
            console.print(f"{info.mapping.resource}/{info.name}", highlight=False)

    def print_yaml(self, infos: List[Info]):
        text = self.exporter.export(info.object for info in infos)
        if text:
            console.print(Syntax(text.rstrip(), "yaml", theme="monokai"))

    def print_json(self, infos: List[Info]):
        objects = [info.object for info in infos]
        payload = objects[0] if len(objects) == 1 else {
            "apiVersion": "v1", "kind": "List", "items": objects,
        }
        console.print_json(json.dumps(payload))

    def print_error(self, error: Exception):
        """Lists every error of an aggregate on its own line."""
        errors = error.errors if isinstance(error, AggregateError) else [error]
        body = "\n".join(f"[red]•[/red] {escape(str(e))}" for e in errors)
        err_console.print(Panel(
            body,
            title=f"[bold red]{len(errors)} error(s)[/bold red]",
            border_style="red",
            expand=False,
        ))
