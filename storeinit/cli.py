import click
import json
import yaml

from .config_loader import load_settings
from .logging_setup import setup_logging
from .mongo_client import get_client, get_db


def _open_db(config, log, stage: str):
    try:
        s = load_settings(config)
    except (ValueError, yaml.YAMLError) as exc:
        # pydantic's ValidationError is a ValueError
        log.error("invalid config", extra={"stage": stage, "config": config})
        raise click.ClickException(f"invalid config {config}: {exc}") from exc
    client = get_client(s)
    return s, client, get_db(s, client)


@click.group()
def cli():
    pass


@cli.group(help="Initialize external resources.")
def bootstrap():
    """Initialize external resources."""
    pass


@bootstrap.command()
@click.option("--config", default="config.yaml", show_default=True)
@click.option(
    "--strict-indexes",
    is_flag=True,
    default=False,
    help="Fail on index drop/create errors instead of logging them.",
)
def mongo(config, strict_indexes):
    log = setup_logging()
    s, client, db = _open_db(config, log, "bootstrap.mongo")
    strict = strict_indexes or s.indexes.strict
    try:
        from .bootstrap.mongo_bootstrap import bootstrap_mongo

        res = bootstrap_mongo(db, strict_indexes=strict)
        log.info(
            "Database initialization completed successfully!",
            extra={"stage": "bootstrap.mongo", "db": s.mongo.db, **res},
        )
    except Exception:
        log.error(
            "bootstrap mongo failed",
            extra={"stage": "bootstrap.mongo", "db": s.mongo.db},
            exc_info=True,
        )
        raise
    finally:
        client.close()


@cli.command(help="Report document and index counts without changing anything.")
@click.option("--config", default="config.yaml", show_default=True)
def report(config):
    log = setup_logging()
    s, client, db = _open_db(config, log, "report")
    try:
        from .bootstrap.mongo_bootstrap import verify_database

        res = verify_database(db)
        log.info("report complete", extra={"stage": "report", "db": s.mongo.db, **res})
    except Exception:
        log.error(
            "report failed",
            extra={"stage": "report", "db": s.mongo.db},
            exc_info=True,
        )
        raise
    finally:
        client.close()


@cli.command(help="Search the product catalog by relevance.")
@click.argument("term")
@click.option("--limit", default=10, show_default=True, type=click.IntRange(1, None))
@click.option("--config", default="config.yaml", show_default=True)
def search(term, limit, config):
    log = setup_logging()
    s, client, db = _open_db(config, log, "search")
    try:
        from .catalog_search import search_products

        for doc in search_products(db, term, limit=limit):
            click.echo(
                json.dumps(
                    {
                        "name": doc.get("name"),
                        "category": doc.get("category"),
                        "score": doc.get("score"),
                    },
                    ensure_ascii=False,
                )
            )
    except Exception:
        log.error(
            "search failed",
            extra={"stage": "search", "db": s.mongo.db, "term": term},
            exc_info=True,
        )
        raise
    finally:
        client.close()


def main():
    cli()


if __name__ == "__main__":
    main()
