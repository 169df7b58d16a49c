import pytest

from qr_validation import (
    DEFAULT_COLOR,
    InvalidColorError,
    MissingDataError,
    RenderRequest,
    Shape,
    ValidationError,
    validate,
)


def test_defaults_when_only_data_given():
    result = validate({"data": "hello"})
    assert result == RenderRequest(data="hello", color="#000000", shape=Shape.SQUARE)
    assert DEFAULT_COLOR == "#000000"


@pytest.mark.parametrize("params", [{}, {"data": ""}, {"color": "ff0000", "shape": "circle"}])
def test_missing_data(params):
    result = validate(params)
    assert isinstance(result, MissingDataError)
    assert result.message == "Missing required parameter 'data'."


def test_missing_data_checked_before_color():
    assert isinstance(validate({"color": "nope"}), MissingDataError)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("ff0000", "#ff0000"),
        ("#ff0000", "#ff0000"),
        ("AbCdEf", "#AbCdEf"),
        ("#123ABC", "#123ABC"),
    ],
)
def test_color_is_normalized_with_case_preserved(raw, expected):
    result = validate({"data": "x", "color": raw})
    assert isinstance(result, RenderRequest)
    assert result.color == expected


@pytest.mark.parametrize(
    "raw",
    ["zzzzzz", "", "#", "fff", "#ff00000", "ff000", "##ff0000", " ff0000", "ff0000\n", "red"],
)
def test_invalid_colors(raw):
    result = validate({"data": "hi", "color": raw})
    assert isinstance(result, InvalidColorError)
    assert result.message == "Invalid 'color' parameter, must be a valid 6 digit hex code."


def test_errors_are_value_errors():
    error = validate({})
    assert isinstance(error, ValidationError)
    assert isinstance(error, ValueError)
    with pytest.raises(ValueError, match="Missing required parameter"):
        raise error


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("square", Shape.SQUARE),
        ("circle", Shape.CIRCLE),
        ("diamond", Shape.DIAMOND),
        ("triangle", Shape.SQUARE),
        ("", Shape.SQUARE),
        ("CIRCLE", Shape.SQUARE),
        (None, Shape.SQUARE),
    ],
)
def test_shape_parse_is_permissive(raw, expected):
    params = {"data": "hi"}
    if raw is not None:
        params["shape"] = raw
    result = validate(params)
    assert isinstance(result, RenderRequest)
    assert result.shape is expected


def test_unknown_parameters_are_ignored():
    result = validate({"data": "hi", "size": "300", "format": "png"})
    assert result == RenderRequest(data="hi")


def test_render_request_is_immutable():
    request = RenderRequest(data="hi")
    with pytest.raises(AttributeError):
        request.color = "#ffffff"
