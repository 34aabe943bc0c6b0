"""Export of invoices to printable documents."""
