"""cate CLI - print files to the terminal with syntax highlighting."""

import io
import logging
import os
import sys
from typing import Optional, TextIO

import click

from . import __version__
from .config import ENV_PREFIX, RenderConfig
from .encoding import ENCODING_GROUPS, UnknownEncodingError
from .grammars.pygments_tokenizer import PygmentsTokenizer
from .grammars.registry import GrammarRegistry
from .source import InputSource
from .ui.color import COLOR_CHOICES, ColorMode, detect_color_mode
from .ui.output import print_source, render_error, render_listing
from .ui.theme import DEFAULT_THEME_NAME, ThemeFileError, ThemeNotFoundError, ThemeRegistry

_log = logging.getLogger(__name__)

STDIN_NAME = "-"


class CateApp:
    """Main cate application: registries built once, reused for every input."""

    def __init__(self, config: RenderConfig, theme_files: tuple = ()):
        self.config = config
        self.grammars = GrammarRegistry()
        self.themes = ThemeRegistry()
        for path in theme_files:
            try:
                theme = self.themes.load_file(path)
            except ThemeFileError as e:
                raise click.BadParameter(str(e), param_hint="'--theme-file'")
            _log.debug("Registered theme %s from %s", theme.name, path)
        try:
            self.theme = self.themes.get(config.theme)
        except ThemeNotFoundError as e:
            raise click.BadParameter(str(e), param_hint="'--theme'")

        self.mode = detect_color_mode(config.color)
        _log.debug("Color mode: %s", self.mode.value)
        self.tokenizer = None
        if config.highlight and self.mode is not ColorMode.NONE:
            self.tokenizer = PygmentsTokenizer(self.grammars, self.theme)

    def cat(self, source: InputSource, sink: TextIO) -> None:
        """Render one input with fresh decoding and render state."""
        print_source(source, self.config, self.grammars, self.tokenizer, self.mode, sink)

    def cat_path(self, path: str, sink: TextIO) -> None:
        if path == STDIN_NAME:
            self.cat(InputSource(click.get_binary_stream("stdin")), sink)
            return
        with open(path, "rb") as stream:
            self.cat(InputSource(stream, name=path), sink)

    def run(self, paths: tuple, sink: TextIO) -> bool:
        """Render every path in order. Returns False if any input failed."""
        ok = True
        for index, path in enumerate(paths or (STDIN_NAME,)):
            if index:
                sink.write("\n")
            try:
                self.cat_path(path, sink)
            except BrokenPipeError:
                raise
            except OSError as e:
                render_error(f"{path}: {e.strerror or e}")
                ok = False
        sink.flush()
        return ok


def print_encodings() -> None:
    render_listing((), title="Supported encodings:")
    for group, names in ENCODING_GROUPS:
        render_listing(names, title=f"  {group}:", indent="    ")


def print_themes(themes: ThemeRegistry) -> None:
    render_listing(
        (f"{name} (default)" if name == DEFAULT_THEME_NAME else name for name in themes.names()),
        title="Available themes:",
    )


def print_syntaxes(grammars: GrammarRegistry) -> None:
    render_listing(grammars.names(), title="Supported syntaxes:")


def _output_stream() -> io.TextIOWrapper:
    return io.TextIOWrapper(
        click.get_binary_stream("stdout"), encoding="utf-8", errors="replace", write_through=True,
    )


def _release_stream(sink: io.TextIOWrapper) -> None:
    # hand the binary stream back so closing the wrapper does not close stdout
    try:
        sink.detach()
    except (BrokenPipeError, ValueError):
        pass


def _silence_stdout() -> None:
    # Python flushes stdout on exit; point it at devnull so that flush cannot fail again.
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, sys.stdout.fileno())
    except (AttributeError, OSError, ValueError):
        pass
    finally:
        os.close(devnull)


@click.command(context_settings={"auto_envvar_prefix": ENV_PREFIX})
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, allow_dash=True))
@click.option("--encoding", "-e", help="Encoding to use when the input is not valid UTF-8")
@click.option("--number", "-n", "line_numbers", is_flag=True, help="Number all output lines")
@click.option("--language", "-l", help="Force a language (name, alias or extension)")
@click.option("--theme", default=DEFAULT_THEME_NAME, show_default=True, help="Color theme")
@click.option("--theme-file", "theme_files", multiple=True,
              type=click.Path(exists=True, dir_okay=False),
              help="Load a YAML theme file (repeatable)")
@click.option("--no-highlight", is_flag=True, help="Print plain text without highlighting")
@click.option("--color", type=click.Choice(COLOR_CHOICES), default="auto", show_default=True,
              help="When to emit color escapes")
@click.option("--fallback-encoding", help="Encoding used when nothing else matches")
@click.option("--debug", is_flag=True, help="Print debug information to stderr")
@click.option("--list-encodings", is_flag=True, help="List supported encodings and exit")
@click.option("--list-themes", is_flag=True, help="List available themes and exit")
@click.option("--list-syntaxes", is_flag=True, help="List supported syntaxes and exit")
@click.version_option(__version__, prog_name="cate")
def cli(
    files: tuple,
    encoding: Optional[str],
    line_numbers: bool,
    language: Optional[str],
    theme: str,
    theme_files: tuple,
    no_highlight: bool,
    color: str,
    fallback_encoding: Optional[str],
    debug: bool,
    list_encodings: bool,
    list_themes: bool,
    list_syntaxes: bool,
):
    """Concatenate FILES to standard output with syntax highlighting.

    With no FILES, or when a FILE is -, read standard input.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="[DEBUG] %(message)s")

    if list_encodings:
        print_encodings()
        return

    try:
        config = RenderConfig.from_options(
            encoding=encoding,
            fallback_encoding=fallback_encoding,
            language=language,
            highlight=not no_highlight,
            theme=theme,
            line_numbers=line_numbers,
            color=color,
        )
    except UnknownEncodingError as e:
        hint = "'--encoding'" if e.name == encoding else "'--fallback-encoding'"
        raise click.BadParameter(str(e), param_hint=hint)

    app = CateApp(config, theme_files)
    if list_themes:
        print_themes(app.themes)
        return
    if list_syntaxes:
        print_syntaxes(app.grammars)
        return

    sink = _output_stream()
    try:
        ok = app.run(files, sink)
    except BrokenPipeError:
        _silence_stdout()
        sys.exit(1)
    finally:
        _release_stream(sink)
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
