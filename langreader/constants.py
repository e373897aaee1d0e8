EM_DASH = "—"
EN_DASH = "–"
MINUS_SIGN = "−"
HYPHEN_MINUS = "-"

DASH_CHARS = (EM_DASH, EN_DASH, MINUS_SIGN, HYPHEN_MINUS)
# Dashes that always separate clauses when they sit between two words.
CLAUSE_DASH_CHARS = (EM_DASH, EN_DASH, MINUS_SIGN)

LEFT_DOUBLE_QUOTE = "“"
RIGHT_DOUBLE_QUOTE = "”"
RIGHT_SINGLE_QUOTE = "’"

# Punctuation that binds to the previous word with no gap.
# Straight quotes are excluded: they are ambiguous between opening and closing.
CLOSING_PUNCTUATION = (",", ".", ";", ":", "!", "?", ")", "]", "}", "»", "›", "…", RIGHT_DOUBLE_QUOTE, RIGHT_SINGLE_QUOTE)

# Punctuation that binds to the following word.
OPENING_PUNCTUATION = ("(", "[", "{", "«", "‹", LEFT_DOUBLE_QUOTE, "¿", "¡")

# Quotes that may open a quotation right after a dash.
OPENING_QUOTES = ('"', "'", LEFT_DOUBLE_QUOTE, "«", "‹")

ELLIPSIS = "…"

# Closing punctuation that takes a space before a glued word.
# Closing quotes are left out so elisions such as l’amico stay joined.
WORD_SPACING_PUNCTUATION = tuple(
    mark for mark in CLOSING_PUNCTUATION if mark not in (RIGHT_DOUBLE_QUOTE, RIGHT_SINGLE_QUOTE)
)
