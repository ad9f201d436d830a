"""
PSD resolution, CSV parsing and normalisation.

Turns a ``PsdDefinition`` (library template reference or uploaded table) into a
concrete, frequency-ordered list of ``PsdPoint``. The template library is an
explicit read-only dependency; nothing here touches module-level state.
"""
import csv
import math
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional

from .types import CsvPsd, PsdDefinition, PsdPoint, PsdTemplate, TemplatePsd


_DELIMITERS = ",\t;"
_SNIFF_LINES = 20
_DUPLICATE_TOLERANCE_HZ = 1e-9


class UnknownTemplateError(LookupError):
    """Raised when a template id is not present in the library."""

    def __init__(self, template_id: str):
        super().__init__(f"Unknown PSD template: {template_id}")
        self.template_id = template_id


class PsdTemplateLibrary:
    """Immutable collection of PSD templates keyed by id.

    Args:
        templates: Templates to index. Ids must be unique.

    Raises:
        ValueError: If two templates share an id.
    """

    def __init__(self, templates: Iterable[PsdTemplate]):
        index = {}
        for template in templates:
            if template.id in index:
                raise ValueError(f"Duplicate PSD template id: {template.id}")
            index[template.id] = template
        self._templates: Mapping[str, PsdTemplate] = MappingProxyType(index)

    def get(self, template_id: str) -> PsdTemplate:
        try:
            return self._templates[template_id]
        except KeyError:
            raise UnknownTemplateError(template_id) from None

    def ids(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __iter__(self) -> Iterator[PsdTemplate]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


def normalize_psd(points: Iterable[PsdPoint]) -> List[PsdPoint]:
    """Sort by frequency and drop invalid or duplicate breakpoints.

    Points with a non-positive or non-finite frequency, or a negative or
    non-finite density, are discarded. Frequencies closer than 1e-9 Hz are
    collapsed and the last occurrence wins.
    """
    valid = [
        p for p in points
        if math.isfinite(p.f_hz) and math.isfinite(p.g2_per_hz)
        and p.f_hz > 0 and p.g2_per_hz >= 0
    ]
    valid.sort(key=lambda p: p.f_hz)

    result: List[PsdPoint] = []
    for point in valid:
        if result and abs(result[-1].f_hz - point.f_hz) < _DUPLICATE_TOLERANCE_HZ:
            result[-1] = PsdPoint(result[-1].f_hz, point.g2_per_hz)
        else:
            result.append(point)
    return result


def _parse_positive(cell: str):
    try:
        value = float(cell)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def _sniff_delimiter(lines: List[str]) -> str:
    """Delimiter of the table; the most frequent candidate when sniffing fails."""
    sample = "\n".join(lines[:_SNIFF_LINES])
    try:
        return csv.Sniffer().sniff(sample, delimiters=_DELIMITERS).delimiter
    except csv.Error:
        return max(_DELIMITERS, key=sample.count)


def parse_psd_csv(text: str, delimiter: Optional[str] = None) -> List[PsdPoint]:
    """Parse a two-column ``f_hz,g2_per_hz`` table.

    Comma, tab and semicolon separated files are accepted; the separator is
    sniffed from the first rows unless ``delimiter`` is given. The first
    non-blank row is treated as a header when its first cell is not numeric.
    Rows whose frequency or density is not a finite positive number are
    dropped; the import itself never fails.

    Args:
        text: Raw file contents.
        delimiter: Column separator; sniffed when None.

    Returns:
        Normalised PSD points (possibly empty).

    Examples:
        >>> parse_psd_csv("f_hz,g2_per_hz\\n10,0.01\\n20,0.02")
        [PsdPoint(f_hz=10.0, g2_per_hz=0.01), PsdPoint(f_hz=20.0, g2_per_hz=0.02)]
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return []
    if delimiter is None:
        delimiter = _sniff_delimiter(lines)

    points: List[PsdPoint] = []
    for i, row in enumerate(csv.reader(lines, delimiter=delimiter, skipinitialspace=True)):
        cells = [c.strip() for c in row]
        if i == 0:
            try:
                float(cells[0])
            except (ValueError, IndexError):
                continue
        if len(cells) < 2:
            continue
        f_hz = _parse_positive(cells[0])
        g2 = _parse_positive(cells[1])
        if f_hz is None or g2 is None:
            continue
        points.append(PsdPoint(f_hz, g2))
    return normalize_psd(points)


def scale_psd(points: Iterable[PsdPoint], k: float) -> List[PsdPoint]:
    """Return a new point list with densities multiplied by ``k``."""
    if not math.isfinite(k):
        return list(points)
    return [PsdPoint(p.f_hz, p.g2_per_hz * k) for p in points]


def resolve_psd(definition: PsdDefinition, library: PsdTemplateLibrary) -> List[PsdPoint]:
    """Resolve a PSD definition into concrete points.

    Args:
        definition: ``TemplatePsd`` or ``CsvPsd``.
        library: Template library used for ``TemplatePsd`` lookups.

    Returns:
        A new list of points. Template densities are multiplied by ``scale``.

    Raises:
        UnknownTemplateError: If a template id is not in the library.
        TypeError: If ``definition`` is not a known PSD variant.
    """
    if isinstance(definition, TemplatePsd):
        template = library.get(definition.template_id)
        return scale_psd(template.points, definition.scale)
    if isinstance(definition, CsvPsd):
        return list(definition.points)
    raise TypeError(f"Unsupported PSD definition: {type(definition).__name__}")
