"""Category management commands."""

from typing import Optional

import click
from dayledger.domain.category import CategoryRegistry, CategoryService
from dayledger.domain.errors import DomainError
from dayledger.cli.error_handling import handle_domain_error


@click.group()
def category_group():
    """Manage item categories."""
    pass


@category_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deleted categories")
@click.pass_context
def list_categories(ctx, include_inactive: bool):
    """List categories grouped by main and sub category."""
    service = CategoryService(ctx.obj["db"])
    categories = service.list_categories(include_inactive=include_inactive)
    if not categories:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    if include_inactive:
        for entry in categories:
            state = "" if entry.is_active else " [deleted]"
            sub = entry.sub_category or "-"
            click.echo(f"{entry.main_category.value} > {sub} > {entry.item_name}{state}")
        return

    registry = CategoryRegistry(categories)
    click.echo("\nCategories:")
    for main_category, by_sub in registry.group_by_category().items():
        click.echo(main_category)
        for sub_category, entries in by_sub.items():
            click.echo(f"  {sub_category or '(no sub category)'}")
            for entry in entries:
                click.echo(f"    {entry.item_name} (order: {entry.display_order})")


@category_group.command("create")
@click.argument("item_name")
@click.option("--main", "main_category", required=True, help="Purchases or Expenses")
@click.option("--sub", "sub_category", help="Sub category (e.g., 'Damage', 'Payroll', 'Assets/Tools')")
@click.option("--order", "display_order", type=int, default=0, help="Display order on the form")
@click.option("--meals/--not-meals", "is_meals_line", default=None, help="Mark a payroll item as staff meals")
@click.pass_context
def create_category(
    ctx,
    item_name: str,
    main_category: str,
    sub_category: Optional[str],
    display_order: int,
    is_meals_line: Optional[bool],
):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(
            item_name=item_name,
            main_category=main_category,
            sub_category=sub_category,
            display_order=display_order,
            is_meals_line=is_meals_line,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    sub_str = f" > {sub_category}" if sub_category else ""
    click.echo(f"Created category '{item_name}' under '{main_category}{sub_str}' (ID: {category_id})")


@category_group.command("update")
@click.argument("item_name")
@click.option("--main", "main_category", help="Purchases or Expenses")
@click.option("--sub", "sub_category", help="New sub category")
@click.option("--order", "display_order", type=int, help="New display order")
@click.option("--meals/--not-meals", "is_meals_line", default=None, help="Mark a payroll item as staff meals")
@click.option("--meals-by-name", is_flag=True, help="Drop the explicit meals flag; the item name decides")
@click.pass_context
def update_category(
    ctx,
    item_name: str,
    main_category: Optional[str],
    sub_category: Optional[str],
    display_order: Optional[int],
    is_meals_line: Optional[bool],
    meals_by_name: bool,
):
    """Reclassify an item. Past reports follow the new classification."""
    if meals_by_name and is_meals_line is not None:
        click.echo("Error: --meals-by-name cannot be combined with --meals/--not-meals", err=True)
        ctx.exit(1)
    service = CategoryService(ctx.obj["db"])
    try:
        entry = service.reclassify(
            item_name,
            main_category=main_category,
            sub_category=sub_category,
            display_order=display_order,
            is_meals_line=is_meals_line,
            clear_meals_flag=meals_by_name,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    sub_str = f" > {entry.sub_category}" if entry.sub_category else ""
    click.echo(f"Updated '{item_name}': {entry.main_category.value}{sub_str}")


@category_group.command("delete")
@click.argument("item_name")
@click.pass_context
def delete_category(ctx, item_name: str):
    """Remove an item from the form (stored days keep their amounts)."""
    service = CategoryService(ctx.obj["db"])
    try:
        service.deactivate(item_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted category '{item_name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
