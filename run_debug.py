#!/usr/bin/env python3
"""
Run the ReggioCorre spider in diagnostic mode.

Instead of races, the output file holds the raw structure of the calendar
page (table/row/link/image counts and the first rows) to troubleshoot the
parser when the site markup changes.
"""

import os
import sys

from scrapy.crawler import CrawlerProcess

# Add the project directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'race_scraping'))
os.environ.setdefault('SCRAPY_SETTINGS_MODULE', 'race_scraping.settings')


def run_spider_with_debug():
    """Run the spider with debug=true and DEBUG logging."""
    from scrapy.utils.project import get_project_settings
    from race_scraping.spiders.reggiocorre_spider import ReggioCorreSpider

    print("Starting ReggioCorre spider in diagnostic mode")
    print("=" * 60)

    settings = {
        **get_project_settings(),
        'ROBOTSTXT_OBEY': False,
        'ENVELOPE_FILE': 'debug_output.json',
        'LOG_LEVEL': 'DEBUG',
    }

    process = CrawlerProcess(settings)
    process.crawl(ReggioCorreSpider, debug='true')
    process.start()
    print("Diagnostics written to debug_output.json")


if __name__ == "__main__":
    run_spider_with_debug()
