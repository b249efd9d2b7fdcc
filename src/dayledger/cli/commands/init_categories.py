"""Initialize default categories."""

import click
from dayledger.domain.category import CategoryService
from dayledger.domain.errors import DomainError


# (item name, main category, sub category, display order)
INITIAL_CATEGORIES = [
    # Purchases
    ("Chicken", "Purchases", "Meat & Poultry", 10),
    ("Meat", "Purchases", "Meat & Poultry", 11),
    ("Vegetables", "Purchases", "Produce", 20),
    ("Bread", "Purchases", "Bakery", 30),
    ("Rice", "Purchases", "Dry goods", 40),
    ("Cooking oil", "Purchases", "Dry goods", 41),
    ("Spices", "Purchases", "Dry goods", 42),
    ("Packaging", "Purchases", "Supplies", 50),
    ("Gas cylinder", "Purchases", "Supplies", 51),
    # Expenses
    ("Spoiled food", "Expenses", "Damage", 100),
    ("Broken dishes", "Expenses", "Damage", 101),
    ("Guest meals", "Expenses", "Hospitality", 110),
    ("Tea and coffee", "Expenses", "Hospitality", 111),
    ("Driver salary", "Expenses", "Payroll", 120),
    ("Kitchen staff wages", "Expenses", "Payroll", 121),
    ("Staff meals", "Expenses", "Payroll", 122),
    ("Freezer", "Expenses", "Assets/Tools", 130),
    ("Kitchen tools", "Expenses", "Assets/Tools", 131),
    ("Electricity", "Expenses", "Utilities", 140),
    ("Water", "Expenses", "Utilities", 141),
]


@click.command("init-categories")
@click.option("--force", is_flag=True, help="Add default categories even if some already exist")
@click.pass_context
def init_categories(ctx, force: bool):
    """Initialize database with the default restaurant categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    existing = service.list_categories()
    if existing and not force:
        click.echo("Categories already exist. Use --force to add the defaults anyway.")
        return

    click.echo("Creating default categories...")

    created = 0
    errors = 0
    for item_name, main_category, sub_category, display_order in INITIAL_CATEGORIES:
        try:
            service.create_category(
                item_name=item_name,
                main_category=main_category,
                sub_category=sub_category,
                display_order=display_order,
            )
            created += 1
        except DomainError as e:
            click.echo(f"Warning: Could not create category '{item_name}': {e}", err=True)
            errors += 1

    if errors == 0:
        click.echo(f"Successfully created {created} categories.")
    else:
        click.echo(f"Created {created} categories with {errors} errors.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
