from histline.utils.json_parser import extract_json_array_from_llm_response


def test_extracts_array_wrapped_in_prose_and_fences():
    text = 'Sure!\n```json\n[{"date": "1945", "summary": "War ends"}]\n```\nDone.'

    assert extract_json_array_from_llm_response(text) == [
        {"date": "1945", "summary": "War ends"}
    ]


def test_returns_none_without_brackets():
    assert extract_json_array_from_llm_response("I could not find any events.") is None


def test_returns_none_for_invalid_json_between_brackets():
    assert extract_json_array_from_llm_response('[{"date": "1945", }') is None
    assert extract_json_array_from_llm_response("[not json]") is None


def test_returns_none_for_empty_input():
    assert extract_json_array_from_llm_response("") is None
    assert extract_json_array_from_llm_response(None) is None


def test_returns_none_when_closing_bracket_precedes_opening():
    assert extract_json_array_from_llm_response("] then [") is None
