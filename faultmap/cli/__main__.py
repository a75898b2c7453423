"""faultmap CLI - Main Entry Point.

Commands:
    tree     - Print the error type taxonomy
    classify - Resolve a fault chain against the default locator
"""

import logging
from typing import Optional

import click

from . import __version__, __cli_name__
from .colors import dim, error, kv, success, tree_item, tree_indent
from ..core import ComponentIdentifier, Error, Event, Fault, FaultKind, MessagingFault
from ..locator import create_default_locator
from ..resolver import MessagingFaultResolver
from ..taxonomy import ErrorType, ErrorTypeRepository, create_default_repository


STANDARD_KINDS = {
    attr: value
    for attr, value in vars(FaultKind).items()
    if isinstance(value, FaultKind)
}


def parse_kind(value: str) -> FaultKind:
    """Accept a standard kind attribute (``CONNECTIVITY``) or any kind name."""
    if value in STANDARD_KINDS:
        return STANDARD_KINDS[value]
    for kind in STANDARD_KINDS.values():
        if kind.name == value:
            return kind
    return FaultKind(value)


def build_chain(links: tuple[str, ...]) -> Fault:
    """Build a fault chain from ``KIND[:MESSAGE]`` links, outermost first."""
    fault: Optional[Fault] = None
    for link in reversed(links):
        kind_name, _, message = link.partition(":")
        fault = Fault(parse_kind(kind_name), message or None, cause=fault)
    return fault


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Log resolution details')
@click.pass_context
def cli(ctx, verbose: bool):
    """Inspect error types and dry-run fault classification."""
    ctx.ensure_object(dict)
    ctx.obj['repository'] = create_default_repository(seal=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command('tree')
@click.pass_context
def tree(ctx):
    """Print the error type taxonomy."""
    repository: ErrorTypeRepository = ctx.obj['repository']

    def walk(node: ErrorType, prefix: str, last: bool):
        tree_item(node.qualified_name, last=last, prefix=prefix)
        children = repository.children(node)
        for i, child in enumerate(children):
            walk(child, tree_indent(prefix, last=last), i == len(children) - 1)

    roots = repository.roots()
    for i, root in enumerate(roots):
        walk(root, "", i == len(roots) - 1)


@cli.command('classify')
@click.argument('links', nargs=-1, required=True)
@click.option('--message', '-m', default="Messaging Error Message", help='Base message')
@click.option('--existing', '-e', default=None, help='Error type already on the event (NS:ID)')
@click.option('--component', '-c', default=None, help='Failing component (namespace:name)')
@click.pass_context
def classify(ctx, links, message: str, existing: Optional[str], component: Optional[str]):
    """
    Resolve a fault chain, outermost link first.

    Examples:
      fm classify SevereFault:"AN ERROR"
      fm classify GENERIC CONNECTIVITY FATAL_SIGNAL:"stop" -e TRANSFORMATION
    """
    repository: ErrorTypeRepository = ctx.obj['repository']

    event = Event()
    if existing:
        existing_type = repository.lookup_name(existing)
        if existing_type is None:
            error(f"Unknown error type '{existing}'")
            ctx.exit(2)
        event.set_error(Error(existing_type))

    mf = MessagingFault(
        message,
        build_chain(links),
        event,
        ComponentIdentifier.parse(component) if component else None,
    )
    resolver = MessagingFaultResolver()
    resolution = resolver.classify(mf, create_default_locator(repository), event.get_error())

    success(str(resolution.error_type))
    kv("Rule", resolution.rule.value)
    kv("Message", resolution.message)
    if resolution.used_fault is not None:
        kv("Fault", str(resolution.used_fault))
    else:
        dim("  (existing classification kept)")


def main():
    """Entry point for `fm` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
