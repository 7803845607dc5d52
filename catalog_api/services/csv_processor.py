import csv
import io
from typing import Dict, Iterable, List, Optional, Union, BinaryIO, TextIO
from catalog_api.errors import ParseError

Source = Union[bytes, str, BinaryIO, TextIO]


class CatalogDialect(csv.Dialect):
    """Comma-separated, double-quoted, quotes escaped by doubling."""
    delimiter = ','
    quotechar = '"'
    escapechar = None
    doublequote = True
    skipinitialspace = False
    lineterminator = '\n'
    quoting = csv.QUOTE_MINIMAL
    strict = True


class CSVProcessor:
    """Turns an uploaded delimited-text file into ordered raw rows."""

    DELIMITER = CatalogDialect.delimiter
    QUOTE_CHAR = CatalogDialect.quotechar
    # Only escapes the quote character, and only inside a quoted field
    ESCAPE_CHAR = '\\'

    @staticmethod
    def read_text(source: Source) -> str:
        """Read the whole source as UTF-8 text (a leading BOM is dropped)."""
        try:
            if hasattr(source, 'read'):
                source = source.read()
            if isinstance(source, (bytes, bytearray)):
                return bytes(source).decode('utf-8-sig')
            if isinstance(source, str):
                return source[1:] if source.startswith('\ufeff') else source
        except UnicodeDecodeError as e:
            raise ParseError(f"File is not valid UTF-8 text: {e}") from e
        except OSError as e:
            raise ParseError(f"Unable to read import source: {e}") from e
        raise ParseError(f"Unsupported import source type: {type(source).__name__}")

    @staticmethod
    def unescape_quotes(text: str) -> str:
        """Rewrite backslash-escaped quotes inside quoted fields as doubled quotes.

        Every other backslash is kept as-is, so Windows paths and JSON
        escapes survive.
        """
        escaped_quote = CSVProcessor.ESCAPE_CHAR + CSVProcessor.QUOTE_CHAR
        if escaped_quote not in text:
            return text

        quote = CSVProcessor.QUOTE_CHAR
        out = []
        in_quotes = False
        field_start = True
        i, n = 0, len(text)
        while i < n:
            c = text[i]
            if in_quotes:
                if text.startswith(escaped_quote, i) or text.startswith(quote * 2, i):
                    out.append(quote * 2)
                    i += 2
                    continue
                if c == quote:
                    in_quotes = False
            else:
                # A quote opens a quoted field only at the start of the field
                if c == quote and field_start:
                    in_quotes = True
                field_start = c in (CSVProcessor.DELIMITER, '\n', '\r')
            out.append(c)
            i += 1
        return ''.join(out)

    @staticmethod
    def _reader(text_content: str, as_dict: bool = False):
        stream = io.StringIO(CSVProcessor.unescape_quotes(text_content), newline='')
        if as_dict:
            return csv.DictReader(stream, dialect=CatalogDialect)
        return csv.reader(stream, dialect=CatalogDialect)

    @staticmethod
    def parse_rows(
        source: Source,
        required_fields: Optional[Iterable[str]] = None
    ) -> List[Dict[str, Optional[str]]]:
        """Parse the source into a list of rows keyed by header field name.

        The header row defines the field names. Quoted fields may contain the
        delimiter, doubled quotes or backslash-escaped quotes. Blank lines are
        skipped. Any malformed quoting fails the whole parse.
        """
        text_content = CSVProcessor.read_text(source)
        reader = CSVProcessor._reader(text_content, as_dict=True)

        try:
            headers = reader.fieldnames
            if not headers:
                raise ParseError("CSV file is empty or has no headers")
            reader.fieldnames = [h.strip() for h in headers]

            if required_fields is not None:
                CSVProcessor.validate_structure(reader.fieldnames, required_fields)

            rows = []
            for row in reader:
                # Cells beyond the header land under the None key
                row.pop(None, None)
                rows.append(row)
        except csv.Error as e:
            raise ParseError(f"Malformed CSV near line {reader.line_num}: {e}") from e

        return rows

    @staticmethod
    def validate_structure(headers: Iterable[str], required_fields: Iterable[str]) -> None:
        """Fail when any required column is missing from the header row."""
        present = set(headers)
        missing = [field for field in required_fields if field not in present]
        if missing:
            raise ParseError(f"Missing required fields in CSV: {', '.join(missing)}")

    @staticmethod
    def count_rows(source: Source) -> int:
        """Count data rows (excluding the header) as parse_rows would see them."""
        text_content = CSVProcessor.read_text(source)
        reader = CSVProcessor._reader(text_content)
        try:
            total = sum(1 for row in reader if row)
        except csv.Error as e:
            raise ParseError(f"Malformed CSV near line {reader.line_num}: {e}") from e
        return max(0, total - 1)
