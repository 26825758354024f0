# Scrapy settings for race_scraping project
#
# For simplicity, this file contains only settings considered important or
# commonly used. You can find more settings consulting the documentation:
#
#     https://docs.scrapy.org/en/latest/topics/settings.html
#     https://docs.scrapy.org/en/latest/topics/downloader-middleware.html
#     https://docs.scrapy.org/en/latest/topics/spider-middleware.html

BOT_NAME = "race_scraping"

SPIDER_MODULES = ["race_scraping.spiders"]
NEWSPIDER_MODULE = "race_scraping.spiders"

ADDONS = {}


# Crawl responsibly by identifying yourself (and your website) on the user-agent
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'

# Obey robots.txt rules
ROBOTSTXT_OBEY = True

# A single page is fetched per run
CONCURRENT_REQUESTS = 1
CONCURRENT_REQUESTS_PER_DOMAIN = 1
DOWNLOAD_DELAY = 1
DOWNLOAD_TIMEOUT = 30

# No retry policy: a failed download becomes a failure envelope
RETRY_ENABLED = False

# Configure item pipelines
# See https://docs.scrapy.org/en/latest/topics/item-pipeline.html
ITEM_PIPELINES = {
    "race_scraping.pipelines.RaceEnvelopePipeline": 300,
}

# Set settings whose default value is deprecated to a future-proof value
FEED_EXPORT_ENCODING = "utf-8"


# Enable logging
LOG_ENABLED = True
LOG_LEVEL = 'INFO'

# Calendar source
CALENDAR_URL = 'https://www.reggiocorre.it/calendario.aspx'
CALENDAR_BASE_URL = 'https://www.reggiocorre.it/'

# Only races within this many days from now are published
RACE_WINDOW_DAYS = 60

# Descriptions are cut to this many characters
DESCRIPTION_MAX_LENGTH = 500

# Year given to "dd/mm" dates:
# - 'current': always the processing year
# - 'rollover': dates already past this year move to next year
YEAR_POLICY = 'current'

# Cell highlight colors marking the first row of a race (bgcolor or style)
MARKER_CELL_COLORS = ['#ffff00', '#ffff99', 'yellow']

# Lines per race when the page has no usable table (6-20)
FLAT_TEXT_MAX_LINES = 12

# Where RaceEnvelopePipeline writes the envelope (or the diagnostics in debug mode)
ENVELOPE_FILE = 'reggiocorre.json'

# Timezone of the calendar: the processing date (year of "dd/mm" dates,
# start of the race window) is taken in this zone
CALENDAR_TIMEZONE = 'Europe/Rome'
