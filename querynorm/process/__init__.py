"""Request normalization, date handling and bool clause construction."""
