import logging
from typing import List, Optional, TextIO

from iluriaexport.config import ExportConfig
from iluriaexport.consolidator import consolidate
from iluriaexport.enricher import ProductPageEnricher
from iluriaexport.exporter import save_enriched_products
from iluriaexport.importer import read_raw_rows
from iluriaexport.product_data import Product
from iluriaexport.progress import ProgressReporter


def run(
    config: ExportConfig,
    progress: Optional[ProgressReporter] = None,
    stream: Optional[TextIO] = None,
    session=None,
) -> List[Product]:
    """Import, consolidate, enrich and export. Any error stops the run."""
    progress = progress or ProgressReporter()
    rows = read_raw_rows(config.file)
    progress.start(len(rows))
    try:
        products = consolidate(rows, config.limit)
        progress.resize(len(products))
        with progress.redirect_logging(), ProductPageEnricher(
            config.url,
            simulate=config.simulate,
            progress=progress,
            session=session,
            user_agent=config.user_agent,
            timeout=config.timeout,
        ) as enricher:
            enricher.enrich_products(products)
    finally:
        progress.finish()

    products_file, variations_file = config.get_output_files()
    save_enriched_products(products, products_file, variations_file, stream=stream)
    logging.info("🎉 Export finished")
    return products
