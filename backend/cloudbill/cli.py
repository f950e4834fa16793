# Overview: Flask CLI command groups for bootstrap and inspection.

# backend/cloudbill/cli.py
# Commands Legend (run from the backend directory, FLASK_APP=wsgi.py):
#
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask orgs list
#   List all organizations with customer/product/invoice counts.
# - python -m flask orgs create --name "Acme Traders" --email owner@acme.test --phone 9876543210 --owner "A. Owner"
#   Register a new organization (prompts for the password).

import click
from flask.cli import with_appcontext

from .errors import BillingError
from .extensions import db
from .models import Organization, Customer, Product, Invoice
from .services import organization_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask orgs create' to add a tenant.")


@click.group('orgs')
def orgs_group():
    """Organization (tenant) management commands."""


@orgs_group.command('list')
@with_appcontext
def list_orgs():
    """List all organizations."""
    orgs = db.session.query(Organization).order_by(Organization.id).all()

    if not orgs:
        click.echo("No organizations found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Name':<30} {'Prefix':<8} {'Active':<8} {'Customers':<10} {'Products':<10} {'Invoices'}")
    click.echo("="*90)

    for org in orgs:
        customer_count = db.session.query(Customer).filter_by(org_id=org.id).count()
        product_count = db.session.query(Product).filter_by(org_id=org.id).count()
        invoice_count = db.session.query(Invoice).filter_by(org_id=org.id).count()
        active_str = "Yes" if org.is_active else "No"

        click.echo(
            f"{org.id:<5} {org.name:<30} {org.invoice_prefix:<8} {active_str:<8} "
            f"{customer_count:<10} {product_count:<10} {invoice_count}"
        )

    click.echo("="*90 + "\n")


@orgs_group.command('create')
@click.option('--name', required=True, help='Organization name (unique)')
@click.option('--email', required=True, help='Contact email (unique)')
@click.option('--phone', required=True, help='Contact phone')
@click.option('--owner', 'owner_name', required=True, help='Owner name')
@click.option('--prefix', 'invoice_prefix', default=None, help='Invoice number prefix (1-2 chars)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_org_cli(name, email, phone, owner_name, invoice_prefix, password):
    """Register a new organization (tenant)."""
    try:
        org = organization_service.register_organization({
            "name": name,
            "email": email,
            "phone": phone,
            "owner_name": owner_name,
            "invoice_prefix": invoice_prefix,
            "password": password,
        })
    except BillingError as e:
        click.echo(f"FAIL {e.message}")
        return

    click.echo(f"PASS Created organization: {org.name} (ID: {org.id}, Prefix: {org.invoice_prefix})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(orgs_group)
