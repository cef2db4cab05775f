import os

# Locale used for constraint messages
LOCALE_DEFAULT = os.getenv("LOCALE_DEFAULT", "en")

# Locale tried when a message is missing in the current one
LOCALE_FALLBACK = os.getenv("LOCALE_FALLBACK", "en")

# Directory holding <locale>.json message files
LOCALE_PATH = os.getenv("LOCALE_PATH", os.path.join(os.getcwd(), "lang"))
