import os
from datetime import datetime
from pathlib import Path

from scrapy.crawler import CrawlerProcess
from scrapy.utils.project import get_project_settings

from race_scraping.spiders.reggiocorre_spider import ReggioCorreSpider

if __name__ == "__main__":
    os.environ.setdefault("SCRAPY_SETTINGS_MODULE", "race_scraping.settings")

    spider_name = ReggioCorreSpider.name
    # Save the envelope to scraped_data folder with date in filename
    scraped_data_dir = Path(__file__).parent / "scraped_data"
    scraped_data_dir.mkdir(exist_ok=True)
    # Format: spidername_YYYY-MM-DD.json
    date_str = datetime.now().strftime("%Y-%m-%d")
    output_file = str(scraped_data_dir / f"{spider_name}_{date_str}.json")

    print(f"Running {ReggioCorreSpider.__name__} spider")
    print(f"Output file: {output_file}")

    process = CrawlerProcess({
        **get_project_settings(),
        "ENVELOPE_FILE": output_file,
        "ROBOTSTXT_OBEY": False,
        "LOG_LEVEL": "INFO",
    })
    # Use the spider class directly instead of the name string
    process.crawl(ReggioCorreSpider)
    process.start()
