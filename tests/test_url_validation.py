import pytest
from aiassistant.utils.url_validation import is_absolute_url


@pytest.mark.parametrize("url", [
    "https://my-resource.openai.azure.com/",
    "https://my-resource.openai.azure.com",
    "http://localhost:8080/openai",
    " https://padded.example.com ",
])
def test_absolute_urls(url):
    assert is_absolute_url(url)


@pytest.mark.parametrize("url", [
    None,
    "",
    "not a url",
    "my-resource.openai.azure.com",
    "/openai/assistants",
    "//my-resource.openai.azure.com",
    "ftp://files.example.com",
    "https://",
    "https://bad host.com",
    "http://localhost:99999",
])
def test_rejected_urls(url):
    assert not is_absolute_url(url)
