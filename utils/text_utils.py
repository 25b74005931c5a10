"""
Text processing and formatting utilities.
"""
import re


# Unicode dash/hyphen variants rendered as ASCII hyphens
DASH_REPLACEMENTS = {
    '\u2011': '-',  # Non-breaking hyphen
    '\u2012': '-',  # Figure dash
    '\u2013': '-',  # En dash
    '\u2014': '-',  # Em dash
    '\u2015': '-',  # Horizontal bar
    '\u2212': '-',  # Minus sign
    '\uFE58': '-',  # Small em dash
    '\uFE63': '-',  # Small hyphen-minus
    '\uFF0D': '-',  # Full-width hyphen-minus
}

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def normalize_dashes(text):
    """
    Convert all Unicode dash variants to regular hyphens.

    Args:
        text (str): Text to normalize

    Returns:
        str: Text with all Unicode dashes converted to ASCII hyphens
    """
    if not text:
        return ""
    for unicode_char, replacement in DASH_REPLACEMENTS.items():
        text = text.replace(unicode_char, replacement)
    return text


def escape_xml_text(text):
    """
    Escape special characters for ReportLab Paragraph markup.

    Args:
        text (str): Text to escape

    Returns:
        str: Escaped text with Unicode dashes normalized to ASCII hyphens
    """
    if not text:
        return ""

    text = normalize_dashes(text)

    # & first
    text = text.replace('&', '&amp;')
    text = text.replace('<', '&lt;')
    text = text.replace('>', '&gt;')
    text = text.replace('"', '&quot;')
    text = text.replace("'", '&apos;')

    return text


def post_process_cover_letter(text):
    """
    Post-process generated cover letter text:
    - Remove all Unicode dash variants
    - Fix percentage spacing (remove space before %)
    - Convert bullet-point style to narrative
    - Clean up formatting

    Args:
        text (str): Cover letter text to process

    Returns:
        str: Processed cover letter text
    """
    if not text:
        return text

    text = normalize_dashes(text)

    # "90 %" -> "90%"
    text = re.sub(r'(\d+)\s+%', r'\1%', text)

    paragraphs = re.split(r'\n\s*\n', text)
    cleaned_paragraphs = []
    for paragraph in paragraphs:
        cleaned_lines = []
        for line in paragraph.split('\n'):
            line = line.strip()
            if not line:
                continue

            if line[0] in ('•', '-', '*', '·'):
                line = line[1:].strip()
            if line and line[0].isdigit() and ('.' in line[:3] or ')' in line[:3]):
                line = re.sub(r'^\d+[\.\)]\s*', '', line)

            if line:
                cleaned_lines.append(line)
        if cleaned_lines:
            cleaned_paragraphs.append('\n'.join(cleaned_lines))

    return '\n\n'.join(cleaned_paragraphs)


def truncate(text, max_length=600):
    """Shorten text to ``max_length`` characters, cutting on a word boundary."""
    if len(text) <= max_length:
        return text
    return re.sub(r'\s+\S*$', '', text[:max_length]) + "..."


def sanitize_filename(value):
    """Replace every non-alphanumeric character with an underscore."""
    return re.sub(r'[^a-zA-Z0-9]', '_', value or '')


def format_year_month(value):
    """Render ``YYYY-MM`` as ``Mon YYYY``."""
    if not value:
        return ""
    parts = value.split('-')
    if len(parts) < 2 or not parts[1].isdigit():
        return value
    month = int(parts[1])
    if not 1 <= month <= 12:
        return parts[0]
    return f"{MONTH_NAMES[month - 1]} {parts[0]}"


def format_date_range(start_date, end_date, is_current=False):
    start = format_year_month(start_date) if start_date else ""
    end = "Present" if is_current else (format_year_month(end_date) if end_date else "")
    if start and end:
        return f"{start} - {end}"
    return start
