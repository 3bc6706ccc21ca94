"""
xmlproj CLI

Command line tool for inspecting and editing XML files through a generic projection
"""

import logging
import sys
from decimal import Decimal
from typing import Annotated, List

import click
from lxml import etree

from . import __version__
from .core import Projection, Value, XMLProjector, XmlProjError, delete, read, write

SCALAR_TYPES = {"str": str, "int": int, "float": float, "bool": bool, "decimal": Decimal}


class Document(Projection):
    """Any document, addressed by the path given on the command line"""

    @read("{0}")
    def text(self, path: str) -> str: ...

    @read("{0}")
    def texts(self, path: str) -> List[str]: ...

    @write("{0}")
    def set_text(self, path: str, value: Annotated[str, Value]) -> "Document": ...

    @delete("{0}")
    def remove(self, path: str) -> "Document": ...


def _open(projector: XMLProjector, document: str) -> Document:
    return projector.load(document, Document)


def _save(projector: XMLProjector, doc: Document, target: str) -> None:
    with open(target, "w", encoding="utf-8") as f:
        f.write(projector.to_string(doc))


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log dispatching and tree changes")
def cli(verbose):
    """xmlproj - read and edit XML documents with path expressions"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command("read")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.argument("path")
@click.option("--all", "select_all", is_flag=True, help="Print every selected node")
@click.option(
    "--type", "type_name",
    type=click.Choice(sorted(SCALAR_TYPES)),
    default="str",
    help="Scalar type to convert the text to",
)
def read_command(document, path, select_all, type_name):
    """Print the text selected by PATH"""
    projector = XMLProjector()
    converter = projector.config.type_converter
    target = SCALAR_TYPES[type_name]
    try:
        doc = _open(projector, document)
        values = doc.texts(path) if select_all else [doc.text(path)]
        for value in values:
            click.echo(converter.convert_to(target, value))
    except (XmlProjError, etree.XPathError, ValueError, ArithmeticError) as e:
        click.echo(f"Read failed: {e}", err=True)
        sys.exit(1)


@cli.command("write")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.argument("path")
@click.argument("value")
@click.option("--output", "-o", type=click.Path(), help="Write the result here instead of in place")
def write_command(document, path, value, output):
    """Set the element text or attribute at PATH to VALUE"""
    projector = XMLProjector()
    try:
        doc = _open(projector, document)
        doc.set_text(path, value)
    except (XmlProjError, etree.XPathError) as e:
        click.echo(f"Write failed: {e}", err=True)
        sys.exit(1)
    _save(projector, doc, output or document)
    click.echo(f"Saved: {output or document}")


@cli.command("delete")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.argument("path")
@click.option("--output", "-o", type=click.Path(), help="Write the result here instead of in place")
def delete_command(document, path, output):
    """Remove every node selected by PATH"""
    projector = XMLProjector()
    try:
        doc = _open(projector, document)
        doc.remove(path)
    except (XmlProjError, etree.XPathError) as e:
        click.echo(f"Delete failed: {e}", err=True)
        sys.exit(1)
    _save(projector, doc, output or document)
    click.echo(f"Saved: {output or document}")


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
def show(document):
    """Print the document"""
    projector = XMLProjector()
    click.echo(str(_open(projector, document)), nl=False)


def main():
    """CLI entry point"""
    cli()


if __name__ == "__main__":
    main()
