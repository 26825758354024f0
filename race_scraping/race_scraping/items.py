# Define here the models for your scraped items
#
# See documentation in:
# https://docs.scrapy.org/en/latest/topics/items.html

import scrapy


class AttachmentsItem(scrapy.Item):
    # Icons and links found in the race row
    has_calendar = scrapy.Field()  # Always True, the envelope itself is a calendar feed
    has_maps = scrapy.Field()
    map_link = scrapy.Field()  # Google Maps search URL built from the venue
    has_email = scrapy.Field()
    email_address = scrapy.Field()
    has_website = scrapy.Field()
    website_url = scrapy.Field()
    has_registration = scrapy.Field()
    registration_url = scrapy.Field()
    has_gpx = scrapy.Field()
    has_attachment1 = scrapy.Field()  # Flyer ("locandina")
    has_attachment2 = scrapy.Field()  # Rules ("regolamento")
    attachment_urls = scrapy.Field()  # Absolute, deduplicated download URLs


class RaceItem(scrapy.Item):
    # Built once by the parser after validation, never updated afterwards
    id = scrapy.Field()  # Position in fragment-discovery order, starting at 1
    date = scrapy.Field()  # ISO date (YYYY-MM-DD)
    time = scrapy.Field()  # HH:MM, "09:00" when missing
    title = scrapy.Field()
    location = scrapy.Field()  # Town, "N/D" when unknown
    province = scrapy.Field()  # Modena, Reggio Emilia, Bologna, Parma or Fuori Provincia
    province_code = scrapy.Field()  # Two letter code, "XY" when unknown
    venue = scrapy.Field()  # Address line, falls back to location
    distances = scrapy.Field()  # Sorted km values, each in (0, 200)
    description = scrapy.Field()
    type = scrapy.Field()  # Corsa su strada, Trail, Camminata, Skyrace, Marathon, Competitiva
    is_competitive = scrapy.Field()
    price = scrapy.Field()  # "Gratuito", "Da definire" or "<N>€"
    organizer = scrapy.Field()
    society = scrapy.Field()
    phone_number = scrapy.Field()
    email_address = scrapy.Field()
    attachments = scrapy.Field()  # AttachmentsItem


class DiagnosticsItem(scrapy.Item):
    # Raw structure counts returned in debug mode instead of races
    debug = scrapy.Field()
    html_length = scrapy.Field()
    table_count = scrapy.Field()
    row_count = scrapy.Field()
    link_count = scrapy.Field()
    image_count = scrapy.Field()
    sample_rows = scrapy.Field()  # [{'cell_count', 'first_cell_text', 'inner_html'}]
