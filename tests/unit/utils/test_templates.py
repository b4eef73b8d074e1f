import jinja2
import pytest

from repoview.utils import get_environment, render_template


class TestTemplates:
    def test_environment_is_shared(self) -> None:
        assert get_environment() is get_environment()

    def test_missing_variable_is_an_error(self) -> None:
        with pytest.raises(jinja2.UndefinedError):
            _ = render_template("mail/watch.txt", author="alice")

    def test_html_templates_autoescape(self) -> None:
        html = render_template(
            "comment.html", paragraphs=[[[("text", "<b>")]]], user_link=""
        )
        assert "&lt;b&gt;" in html
