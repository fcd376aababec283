import logging
import os

import click
from jinja2 import Environment, PackageLoader, select_autoescape

from .loader import TaxonomyLoadError
from .service import TaxonomyService


def _load(service: TaxonomyService):
    try:
        return service.load_base_taxonomy()
    except TaxonomyLoadError as e:
        cause = f": {e.__cause__}" if e.__cause__ else ""
        raise click.ClickException(f"{e}{cause}")


def _echo_tree(taxonomy):
    for depth, category in taxonomy.iter_with_depth():
        click.echo(f"{'  ' * depth}{category.english_name} ({category.class_name})")


@click.group()
@click.option('--schema', envvar='FURNITURE_TAXONOMY_SCHEMA', default=None,
              type=click.Path(dir_okay=False),
              help='Turtle file to load instead of the bundled furniture taxonomy.')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging.')
@click.pass_context
def main(ctx, schema, verbose):
    """Inspect the furniture category taxonomy."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = TaxonomyService(schema_path=schema)


@main.command()
@click.pass_obj
def stats(service):
    """Print category counts."""
    _load(service)
    result = service.get_stats()
    click.echo(f"Total categories: {result.total_categories}")
    click.echo(f"Root categories: {result.root_categories}")


@main.command()
@click.argument('class_name')
@click.pass_context
def show(ctx, class_name):
    """Show a single category and its properties."""
    service = ctx.obj
    _load(service)
    category = service.get_category_by_class_name(class_name)
    if category is None:
        click.echo(f"Unknown class: {class_name}", err=True)
        ctx.exit(1)

    click.echo(f"{category.class_name} <{category.uri}>")
    click.echo(f"  English: {category.english_name}")
    if category.norwegian_name:
        click.echo(f"  Norwegian: {category.norwegian_name}")
    if category.description:
        click.echo(f"  Description: {category.description}")
    click.echo(f"  Parent: {category.parent_class_name or '-'}")
    if category.children:
        click.echo("  Children: " + ", ".join(c.class_name for c in category.children))
    for prop in category.properties:
        label = prop.english_label or prop.name
        click.echo(f"  - {prop.name} [{prop.property_type.value}] {label}")


@main.command()
@click.pass_obj
def tree(service):
    """Print the category hierarchy."""
    _echo_tree(_load(service))


@main.command()
@click.option('--output', '-o', default='taxonomy.html', help='Output HTML file.')
@click.pass_obj
def render(service, output):
    """Render the taxonomy as an HTML page."""
    taxonomy = _load(service)
    env = Environment(
        loader=PackageLoader("furniture_taxonomy"),
        autoescape=select_autoescape()
    )
    template = env.get_template("taxonomy.html")
    html = template.render(taxonomy=taxonomy, stats=service.get_stats())

    output_dir = os.path.dirname(os.path.abspath(output))
    if not os.path.exists(output_dir):
        os.makedirs(output_dir)
    with open(output, 'w', encoding='utf-8') as f:
        f.write(html)
    click.echo(f"Taxonomy rendered to {output}")


if __name__ == '__main__':
    main()
