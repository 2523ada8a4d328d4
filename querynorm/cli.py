"""Command-line entrypoint: normalize a query string against a mapping."""

import json
from urllib.parse import parse_qsl

import click
from werkzeug.datastructures import MultiDict

from querynorm import config
from querynorm.domain import SearchDefaults
from querynorm.exceptions import ConfigurationError, MappingError
from querynorm.process.normalize import QueryNormalizer
from querynorm.services.mapping import load_mapping
from querynorm.services.prepare import prepare_search


@click.command()
@click.argument("querystring", default="")
@click.option("--mapping", "mapping_path", envvar="QUERYNORM_MAPPING",
              required=True, type=click.Path(exists=True, dir_okay=False),
              help="Elasticsearch mapping document (JSON).")
@click.option("--doc-type", envvar="QUERYNORM_DOC_TYPE", default=None,
              help="Document type, for legacy typed mappings.")
@click.option("--timezone", default=config.TIMEZONE, show_default=True)
@click.option("--date-field", default=config.DATE_RANGE_FIELD,
              help="Date range field [default: timestamp, if mapped]")
@click.option("--tiebreaker", default=config.TIEBREAKER_FIELD,
              show_default=True)
@click.option("--sort", "default_sort", default=config.DEFAULT_SORT,
              show_default=True, help="Default sort field.")
@click.option("--order", "default_order", default=config.DEFAULT_ORDER,
              show_default=True, help="Default sort order.")
@click.option("--size", "default_size", default=config.DEFAULT_SIZE,
              type=int, show_default=True, help="Default page size.")
@click.option("--search", "as_search", is_flag=True,
              help="Print the prepared Elasticsearch request body instead.")
def normalize(querystring: str, mapping_path: str, doc_type: str,
              timezone: str, date_field: str, tiebreaker: str,
              default_sort: str, default_order: str, default_size: int,
              as_search: bool) -> None:
    """Normalize QUERYSTRING (e.g. 'sort=title&size=10') and print JSON."""
    try:
        mapping = load_mapping(mapping_path, doc_type)
        normalizer = QueryNormalizer(
            mapping,
            SearchDefaults(default_sort, default_order, default_size),
            timezone=timezone,
            date_field=date_field,
            tiebreaker=tiebreaker,
        )
    except (MappingError, ConfigurationError) as ex:
        raise click.ClickException(str(ex)) from ex

    params = MultiDict(parse_qsl(querystring, keep_blank_values=True))
    request = normalizer.normalize(params)
    if as_search:
        data = prepare_search(request, mapping).to_dict()
    else:
        data = request.to_dict()
    click.echo(json.dumps(data, indent=2, default=str))


if __name__ == "__main__":
    normalize()
