"""Static patterns and vocabularies used to read the ReggioCorre calendar.

Everything site-specific lives here so the extraction rules can be audited
(and tested) without walking through the extractor code.
"""
import re

# "4/10", "31/12" anywhere in a text, not part of a longer date like 4/10/2024
DATE_PATTERN = re.compile(r'(?<![\d/])(\d{1,2})/(\d{1,2})(?![\d/])')
# A cell whose emphasized text is exactly a date
ANCHOR_DATE_PATTERN = re.compile(r'^\s*(\d{1,2})/(\d{1,2})\s*$')
# A text line opening with a date
LEADING_DATE_PATTERN = re.compile(r'^\s*(\d{1,2})/(\d{1,2})(?![\d/])')

TIME_PATTERN = re.compile(r'(?<!\d)(\d{1,2}):(\d{2})(?!\d)')
DEFAULT_TIME = '09:00'

# A line made of a single province code, e.g. "RE"
PROVINCE_CODE_LINE = re.compile(r'^([A-Z]{2})$')
# The date cell read as one line, e.g. "4/10 Venerdì RE"
DATED_PROVINCE_CODE_LINE = re.compile(r'^\s*\d{1,2}/\d{1,2}(?![\d/]).*\s([A-Z]{2})$')
UNKNOWN_PROVINCE_CODE = 'XY'
OUT_OF_AREA = 'Fuori Provincia'

PROVINCES = {
    'MO': 'Modena',
    'RE': 'Reggio Emilia',
    'BO': 'Bologna',
    'PR': 'Parma',
}

# Place names per province code, checked in this order (home province first)
GAZETTEER = {
    'RE': [
        'Reggio Emilia', 'Reggio nell\'Emilia', 'Scandiano', 'Correggio', 'Guastalla',
        'Castelnovo ne\' Monti', 'Casalgrande', 'Rubiera', 'Quattro Castella',
        'Albinea', 'Bibbiano', 'Cavriago', 'Montecchio Emilia', 'Novellara',
        'Sant\'Ilario d\'Enza', 'Vezzano sul Crostolo', 'Carpineti', 'Casina', 'Baiso',
        'Viano', 'Toano', 'Villa Minozzo', 'Ventasso', 'Canossa', 'San Polo d\'Enza',
        'Bagnolo in Piano', 'Cadelbosco di Sopra', 'Castelnovo di Sotto', 'Poviglio',
        'Brescello', 'Boretto', 'Gualtieri', 'Luzzara', 'Reggiolo', 'Rolo', 'Fabbrico',
        'Campagnola Emilia', 'Rio Saliceto', 'San Martino in Rio', 'Gattatico',
        'Campegine', 'Castellarano', 'Vetto',
    ],
    'MO': [
        'Modena', 'Carpi', 'Sassuolo', 'Formigine', 'Fiorano Modenese', 'Maranello',
        'Vignola', 'Mirandola', 'Castelfranco Emilia', 'Pavullo nel Frignano',
        'Finale Emilia', 'Soliera', 'Nonantola', 'Spilamberto', 'Castelvetro di Modena',
        'Serramazzoni', 'Fanano', 'Sestola', 'Zocca', 'Novi di Modena', 'Concordia sulla Secchia',
        'San Felice sul Panaro', 'Campogalliano', 'Bomporto', 'Bastiglia', 'Savignano sul Panaro',
        'Prignano sulla Secchia', 'Montefiorino', 'Frassinoro', 'Pievepelago',
    ],
    'BO': [
        'Bologna', 'Imola', 'Casalecchio di Reno', 'San Lazzaro di Savena', 'Budrio',
        'Zola Predosa', 'Pianoro', 'Sasso Marconi', 'Castel Maggiore',
        'San Giovanni in Persiceto', 'Castenaso', 'Porretta Terme',
        'Crevalcore', 'Sant\'Agata Bolognese', 'Anzola dell\'Emilia', 'Valsamoggia',
    ],
    'PR': [
        'Parma', 'Fidenza', 'Salsomaggiore Terme', 'Collecchio', 'Langhirano', 'Noceto',
        'Sala Baganza', 'Felino', 'Traversetolo', 'Montechiarugolo', 'Sorbolo', 'Colorno',
        'Busseto', 'Borgo Val di Taro', 'Fornovo di Taro', 'Neviano degli Arduini',
        'Lesignano de\' Bagni', 'Torrile', 'Fontanellato',
    ],
}

# Edition markers such as "1°", "2ª", "3^", "10º"
ORDINAL_PATTERN = re.compile(r'\b\d{1,3}\s?[°ºª^]\s*')

ADDRESS_MARKER = re.compile(r'\b(?:Via|Viale|Piazza|Piazzale|Corso)\b')
VENUE_MIN_LENGTH = 15
VENUE_MAX_LENGTH = 150

IMAGE_FILENAME = re.compile(r'\.(?:png|jpe?g|gif)\b', re.IGNORECASE)
DESCRIPTION_MIN_LINE_LENGTH = 5
DESCRIPTION_MAX_LENGTH = 500

NO_LOCATION = 'N/D'
LOCATION_MIN_LENGTH = 3
LOCATION_MAX_LENGTH = 40
# Leading postal code and trailing "(RE)" around a town name
POSTAL_CODE_PREFIX = re.compile(r'^\d{5}\s+')
PROVINCE_SUFFIX = re.compile(r'\s*\(\s*[A-Za-z]{2}\s*\)\s*$')
CAPITALIZED_WORD = re.compile(r'\b([A-ZÀ-Ý][a-zà-ÿ]{2,})\b')

# Tried in order, every hit of every pattern is kept
NUMBER = r'(\d+(?:[.,]\d+)?)'
DASH = r'\s*[-–]\s*'
DISTANCE_PATTERNS = [
    re.compile(NUMBER + r'\s*km\b', re.IGNORECASE),
    re.compile(NUMBER + DASH + NUMBER + DASH + NUMBER),
    re.compile(NUMBER + DASH + NUMBER),
    re.compile(r'(?<![\d.,])(\d+[.,]\d+)(?![\d.,]|\s*(?:€|euro))', re.IGNORECASE),
]
MAX_DISTANCE = 200

DEFAULT_RACE_TYPE = 'Corsa su strada'
# (keywords, race type), first match wins
RACE_TYPES = [
    (('trail',), 'Trail'),
    (('camminata',), 'Camminata'),
    (('skyrace',), 'Skyrace'),
    (('marathon', 'maratona'), 'Marathon'),
    (('competitiv',), 'Competitiva'),
]
COMPETITIVE_KEYWORDS = ('competitiv', 'grand prix')

PRICE_PATTERN = re.compile(r'(\d+(?:,\d{1,2})?)\s*€')
FREE_KEYWORDS = ('gratuit', 'gratis', 'libera')
FREE_PRICE = 'Gratuito'
UNKNOWN_PRICE = 'Da definire'

ORGANIZER_PATTERN = re.compile(r'Organizzatore\s*:\s*(.+?)(?:\s+-\s+|$)', re.IGNORECASE)
SOCIETY_PATTERN = re.compile(r'Societ[àa] o gruppo sportivo\s*:\s*(.+?)(?:\s+-\s+|$)', re.IGNORECASE)
EMAIL_PATTERN = re.compile(r'[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}')
PHONE_PATTERN = re.compile(r'(?<!\d)(\d{3})[\s\-]?(\d{3,4})[\s\-]?(\d{4})(?!\d)')

# Substrings of image src/alt identifying each attachment icon
ATTACHMENT_ICONS = {
    'maps': ('maps', 'mappa'),
    'email': ('email', 'mail'),
    'website': ('www', 'web'),
    'registration': ('iscrizione',),
    'gpx': ('gpx',),
    'attachment1': ('allegato1', 'locandina'),
    'attachment2': ('allegato2', 'regolamento'),
}
REGISTRATION_LINK_MARKERS = ('iscri', 'endu.net', 'iscrizione')
WEBSITE_LINK_MARKERS = ('sito', 'www')
DOWNLOAD_EXTENSIONS = ('.pdf', '.gpx', '.jpg', '.png')

GAZETTEER_PATTERNS = [
    (code, place, re.compile(r'(?<!\w)' + re.escape(place) + r'(?!\w)', re.IGNORECASE))
    for code, places in GAZETTEER.items()
    for place in places
]
