"""Scene file input and output.

Two formats are supported:

JSON (``.json``): the dictionary produced by ``SceneManager.to_dict()``.

Token stream (any other suffix, or standard input): whitespace separated
numbers in the order the interactive prompts ask for them::

    width height fov
    r g b specular_exponent a0 a1 a2     (one line per material)
    -666
    x y z radius material_number         (one line per sphere)
    -666
    x y z intensity                      (one line per light)
    -666

Material numbers in the token stream start at 1. Each list ends with the
sentinel -666; reaching the end of the input also ends the current list.

Example:
    >>> from raycaster.scene.loader import parse_scene_tokens
    >>> config = parse_scene_tokens('''
    ...     64 48 60
    ...     1 0 0  10  1 0 0
    ...     -666
    ...     0 0 5  1  1
    ...     -666
    ...     0 0 0  1
    ...     -666
    ... ''')
    >>> len(config.spheres)
    1
"""

from __future__ import annotations

import json
import logging
from collections import deque
from collections.abc import Callable, Iterator
from pathlib import Path

from raycaster.scene.manager import SceneConfig

logger = logging.getLogger(__name__)

# Token that ends a list in the token stream format
SENTINEL = -666.0

HELP_TEXT = """\
To enter an integer write it and press Enter.
To enter a fractional number write it using a decimal point and press Enter.
To enter several numbers write them separated by spaces and press Enter.
To enter a list write each element on a new line, then write -666 and press Enter.

Colors are entered as 3 numbers from 0 to 1: the red, green and blue components.
Factors are entered as fractional numbers.
"""


class SceneFormatError(ValueError):
    """Raised when scene input cannot be parsed."""


class _TokenReader:
    """Sequential reader over a stream of numeric tokens.

    ``reading`` names the value being read and ``at_list_head`` tells
    whether it is the first number of a list entry.
    """

    def __init__(self, tokens: Iterator[str]) -> None:
        self._tokens = tokens
        self.position = 0
        self.reading = ""
        self.at_list_head = False

    def begin_list(self, index: int) -> None:
        """Called before the materials (0), spheres (1) and lights (2) lists."""

    def next_token(self) -> str | None:
        token = next(self._tokens, None)
        if token is not None:
            self.position += 1
        return token

    def read_float(self, what: str) -> float:
        self.reading = what
        self.at_list_head = False
        token = self.next_token()
        if token is None:
            raise SceneFormatError(f"Unexpected end of input while reading {what}")
        return self._to_float(token, what)

    def read_int(self, what: str) -> int:
        value = self.read_float(what)
        if not value.is_integer():
            raise SceneFormatError(f"Expected an integer for {what}, got {value}")
        return int(value)

    def read_list_head(self, what: str) -> float | None:
        """Read the first number of a list entry, or None at the sentinel."""
        self.reading = what
        self.at_list_head = True
        token = self.next_token()
        if token is None:
            return None
        value = self._to_float(token, what)
        if value == SENTINEL:
            return None
        return value

    def _to_float(self, token: str, what: str) -> float:
        try:
            return float(token)
        except ValueError as e:
            raise SceneFormatError(
                f"Token {self.position} ({token!r}) is not a number (reading {what})"
            ) from e


def _iter_tokens(text: str) -> Iterator[str]:
    yield from text.split()


def _read_tokens(reader: _TokenReader) -> SceneConfig:
    """Read a complete scene from a token reader."""
    width = reader.read_int("image width")
    height = reader.read_int("image height")
    fov = reader.read_float("field of view")
    config = SceneConfig(camera={"width": width, "height": height, "fov": fov})

    reader.begin_list(0)
    number = 1
    while (r := reader.read_list_head(f"material {number}")) is not None:
        what = f"material {number}"
        g = reader.read_float(what)
        b = reader.read_float(what)
        exponent = reader.read_float(what)
        albedo = [reader.read_float(what) for _ in range(3)]
        config.materials.append(
            {"base_color": [r, g, b], "specular_exponent": exponent, "albedo": albedo}
        )
        number += 1

    reader.begin_list(1)
    number = 1
    while (x := reader.read_list_head(f"sphere {number}")) is not None:
        what = f"sphere {number}"
        y = reader.read_float(what)
        z = reader.read_float(what)
        radius = reader.read_float(what)
        material_number = reader.read_int(what)
        if not 1 <= material_number <= len(config.materials):
            raise SceneFormatError(
                f"Sphere {number} refers to material {material_number}, "
                f"but {len(config.materials)} materials are defined"
            )
        config.spheres.append(
            {"center": [x, y, z], "radius": radius, "material_id": material_number - 1}
        )
        number += 1

    reader.begin_list(2)
    number = 1
    while (x := reader.read_list_head(f"light {number}")) is not None:
        what = f"light {number}"
        y = reader.read_float(what)
        z = reader.read_float(what)
        intensity = reader.read_float(what)
        config.lights.append({"position": [x, y, z], "intensity": intensity})
        number += 1

    return config


def parse_scene_tokens(text: str) -> SceneConfig:
    """Parse a scene in the token stream format.

    Args:
        text: The whole input.

    Returns:
        The parsed scene configuration (material ids are 0-based).

    Raises:
        SceneFormatError: If the input is truncated, contains a non-numeric
            token or a sphere refers to an undefined material.
    """
    return _read_tokens(_TokenReader(_iter_tokens(text)))


def format_scene_tokens(config: SceneConfig) -> str:
    """Write a scene configuration in the token stream format."""
    camera = config.camera or {}
    lines = [f"{camera['width']} {camera['height']} {camera['fov']!r}"]
    for mat in config.materials:
        values = [*mat["base_color"], mat["specular_exponent"], *mat["albedo"]]
        lines.append(" ".join(repr(float(v)) for v in values))
    lines.append("-666")
    for sphere in config.spheres:
        values = [*sphere["center"], sphere["radius"]]
        lines.append(
            " ".join(repr(float(v)) for v in values) + f" {int(sphere['material_id']) + 1}"
        )
    lines.append("-666")
    for light in config.lights:
        values = [*light["position"], light["intensity"]]
        lines.append(" ".join(repr(float(v)) for v in values))
    lines.append("-666")
    return "\n".join(lines) + "\n"


_VALUE_PROMPTS = {
    "image width": "Enter image width (int):                ",
    "image height": "Enter image height (int):               ",
    "field of view": "Enter field of view in degrees (float): ",
}

# Shown when an entry continues on a new line
_CONTINUATION_PROMPT = "   "

_LIST_HEADERS = (
    "\nEnter the list of materials in format (color; specular exponent; "
    "influence factors of: own color, specularity, reflection):",
    "\nThe camera is located at (0, 0, 0) and looks along the 3rd axis.\n"
    "Enter the list of spheres in format (coordinates (3 numbers); radius; "
    "material number):",
    "\nEnter the list of light sources in format (coordinates (3 numbers); intensity):",
)


class _PromptingReader(_TokenReader):
    """Token reader that asks for a new line whenever it runs out of tokens.

    The prompt is chosen from the value that is being read, so typing
    several values on one line skips the prompts for those values.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str],
        output_fn: Callable[[str], None],
    ) -> None:
        super().__init__(iter(()))
        self._input_fn = input_fn
        self._output_fn = output_fn
        self._pending: deque[str] = deque()
        self._exhausted = False
        self._entry = 0

    def begin_list(self, index: int) -> None:
        self._entry = 0
        self._output_fn(_LIST_HEADERS[index])

    def read_list_head(self, what: str) -> float | None:
        self._entry += 1
        return super().read_list_head(what)

    def next_token(self) -> str | None:
        while not self._pending:
            if self._exhausted:
                return None
            try:
                line = self._input_fn(self._prompt())
            except EOFError:
                self._exhausted = True
                return None
            self._pending.extend(line.split())
        self.position += 1
        return self._pending.popleft()

    def _prompt(self) -> str:
        if self.reading in _VALUE_PROMPTS:
            return _VALUE_PROMPTS[self.reading]
        if self.at_list_head:
            return f"{self._entry}. "
        return _CONTINUATION_PROMPT


def prompt_scene(
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> SceneConfig:
    """Ask for a scene on the console, one prompt per value or list entry.

    The prompts follow the token stream layout: image width, height and
    field of view, then numbered entries for each list until -666 is typed.
    A line may hold several values; the next prompt is for the first value
    still missing.

    Args:
        input_fn: Reads one line after showing a prompt.
        output_fn: Prints help text and list headers.

    Returns:
        The entered scene configuration.

    Raises:
        SceneFormatError: If the input is malformed or ends early.
    """
    output_fn(HELP_TEXT)
    return _read_tokens(_PromptingReader(input_fn, output_fn))


def load_scene_file(path: str | Path) -> SceneConfig:
    """Load a scene from a JSON or token stream file.

    Raises:
        OSError: If the file cannot be read.
        SceneFormatError: If the file content is malformed.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    logger.debug("Loading scene from %s", path)

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SceneFormatError(f"{path}: invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SceneFormatError(f"{path}: expected a JSON object at the top level")
        return SceneConfig(
            camera=data.get("camera"),
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
        )

    return parse_scene_tokens(text)


def save_scene_file(path: str | Path, config: SceneConfig) -> None:
    """Save a scene as JSON (``.json`` suffix) or in the token stream format."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        data = {
            "camera": config.camera,
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
        }
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    else:
        path.write_text(format_scene_tokens(config), encoding="utf-8")
    logger.debug("Saved scene to %s", path)
