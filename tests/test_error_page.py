from pages.error import error_title


def test_known_statuses_get_specific_titles():
    assert error_title(400) == "That ticker or period is not valid."
    assert error_title(404) == "Page not found."


def test_other_statuses_fall_back_to_generic_title():
    assert error_title(500) == "Something went wrong."
