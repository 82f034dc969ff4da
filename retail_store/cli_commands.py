"""
Flask CLI commands for persisted receipts.

Commands:
- flask show-receipt N: Print a persisted receipt
- flask list-receipts: List persisted receipt numbers with their totals
"""

import click
from flask import current_app

from retail_store.exceptions import StoreError
from retail_store.utils.formatters import money_with_currency


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('show-receipt')
    @click.argument('number', type=int)
    def show_receipt(number):
        """Print the receipt with the given number from the receipt store."""
        receipt_store = current_app.extensions['receipt_store']
        try:
            receipt = receipt_store.read_receipt_record(number)
        except StoreError as e:
            click.echo(click.style(f'❌ {e.message}', fg='red'), err=True)
            raise SystemExit(1)

        click.echo(receipt.to_text())

    @app.cli.command('list-receipts')
    def list_receipts():
        """List every receipt in the receipt store."""
        receipt_store = current_app.extensions['receipt_store']
        numbers = receipt_store.list_receipt_numbers()
        if not numbers:
            click.echo('No receipts found.')
            return

        for number in numbers:
            try:
                receipt = receipt_store.read_receipt_record(number)
            except StoreError as e:
                click.echo(click.style(f'#{number}: {e.message}', fg='yellow'))
                continue
            click.echo(
                f'#{receipt.number}  {receipt.timestamp:%Y-%m-%d %H:%M}  '
                f'{receipt.cashier.name}  {money_with_currency(receipt.total_amount)}'
            )
