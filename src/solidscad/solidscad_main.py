import argparse
import inspect
import logging
import os
import sys
from typing import Callable, List, Union

from datatrees import datatree, dtfield

import solidscad as scad
from solidscad.base import CodeDumper, FileWriter, PoscBase

log = logging.getLogger(__name__)


def add_bool_arg(parser, name, help_text, default=False):
    parser.add_argument(f"--{name}", action="store_true", help=help_text)
    parser.add_argument(f"--no-{name}", action="store_false", dest=name, help=f"Disable: {help_text}")
    parser.set_defaults(**{name: default})


@datatree
class ScadMainRunner:
    """Parses arguments and writes OpenScad scripts for the given models."""
    items: list[Callable[[], PoscBase] | PoscBase]
    script_path: str
    argv: list[str] | None = None
    variables: scad.VariableScope | None = None
    _args: argparse.Namespace | None = dtfield(default=None, init=False)
    parser: argparse.ArgumentParser | None = dtfield(
        self_default=lambda s: s._make_parser(), init=False)
    default_scad: bool = True
    default_stdout: bool = False
    default_indent: int = 2
    default_output_base: str | None = None

    @property
    def args(self) -> argparse.Namespace:
        if self._args is None:
            self.parse_args()
        return self._args

    def _make_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description="Generate OpenSCAD scripts from solidscad models.")
        parser.add_argument(
            "--output-base",
            type=str,
            default=self.default_output_base,
            help="Base name for the output .scad file. Defaults to the name of the calling script."
        )
        add_bool_arg(parser, "scad", "Write the script to a .scad file.", default=self.default_scad)
        add_bool_arg(parser, "stdout", "Print the script to stdout.", default=self.default_stdout)
        parser.add_argument(
            "--indent", type=int, default=self.default_indent, help="Spaces per indent level.")
        return parser

    def parse_args(self):
        self._args = self.parser.parse_args(self.argv)

    def output_base(self) -> str:
        if self.args.output_base is None:
            return os.path.splitext(self.script_path)[0]
        return self.args.output_base

    def get_model(self) -> PoscBase:
        """Evaluates the items, joining several under a LazyUnion."""
        models = [item if isinstance(item, PoscBase) else item() for item in self.items]
        if len(models) == 1:
            return models[0]
        return scad.LazyUnion()(*models)

    def run(self):
        if not self.items:
            print("No models were provided.", file=sys.stderr)
            return

        if not (self.args.scad or self.args.stdout):
            print("No action specified. Use --scad or --stdout.", file=sys.stderr)
            return

        model = self.get_model()

        if self.args.scad:
            filename = f"{self.output_base()}.scad"
            with open(filename, 'w', encoding='utf-8') as fp:
                model.dump_with_code_dumper(
                    CodeDumper(indent_multiple=self.args.indent, writer=FileWriter(fp)),
                    self.variables)
            log.debug('wrote %d model(s) to %s', len(self.items), filename)
            print(f"Exported SCAD: {filename}")

        if self.args.stdout:
            sys.stdout.write(
                model.dump_with_code_dumper(
                    CodeDumper(indent_multiple=self.args.indent), self.variables).writer.get())


def solidscad_main(
    items: List[Union[Callable[[], PoscBase], PoscBase]],
    default_scad: bool = True,
    default_stdout: bool = False,
    default_indent: int = 2,
    default_output_base: str | None = None,
    variables: scad.VariableScope | None = None,
    argv: List[str] | None = None,
    ):
    """
    Main entry point for generating OpenScad scripts via command line.

    Args:
        items: A list containing PoscBase objects or functions that return
               PoscBase objects.
        variables: Variables written at the top of the script.
        argv: Command line arguments, defaults to sys.argv[1:].
    """
    # Get the file path of the script that called solidscad_main
    try:
        calling_frame = inspect.stack()[1]
        script_path = calling_frame.filename
    except IndexError:
        script_path = "unknown_script.py"

    runner = ScadMainRunner(items,
                            script_path,
                            argv=argv,
                            variables=variables,
                            default_scad=default_scad,
                            default_stdout=default_stdout,
                            default_indent=default_indent,
                            default_output_base=default_output_base)
    runner.run()
    return runner


if __name__ == "__main__":
    r = scad.Variable('r', 5)
    solidscad_main(
        [scad.Cube(10), lambda: scad.Color("red")(scad.Sphere(r).add_modifier(scad.DEBUG))],
        default_scad=False,
        default_stdout=True,
        variables=scad.VariableScope(r))
