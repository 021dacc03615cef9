import logging
LOGGER = logging.getLogger(__name__)

import pytest
from pydantic import ValidationError
from aiassistant.service.secrets import PrefixSecretManager, AssistantSecrets


class TestPrefixSecretManager:

  def test_load_matching_prefix(self):
    manager = PrefixSecretManager("app")
    assert manager.load("app-Foo--Bar")
    assert manager.load("app-Key")

  @pytest.mark.parametrize("name", ["other-Foo", "app", "appFoo", "App-Foo", "xapp-Foo", ""])
  def test_load_rejects_other_names(self, name):
    assert not PrefixSecretManager("app").load(name)

  def test_get_key_translates_delimiter(self):
    manager = PrefixSecretManager("app")
    assert manager.get_key("app-Foo--Bar") == "Foo:Bar"
    assert manager.get_key("app-AIAssistant--EndPoint") == "AIAssistant:EndPoint"
    assert manager.get_key("app-A--B--C") == "A:B:C"
    assert manager.get_key("app-Plain") == "Plain"

  def test_get_key_is_pure(self):
    manager = PrefixSecretManager("app")
    first = manager.get_key("app-Foo--Bar")
    assert all(manager.get_key("app-Foo--Bar") == first for _ in range(5))
    assert PrefixSecretManager("app").get_key("app-Foo--Bar") == first

  def test_prefix_with_dashes(self):
    manager = PrefixSecretManager("hci-ai")
    assert manager.load("hci-ai-AIAssistant--Id")
    assert manager.get_key("hci-ai-AIAssistant--Id") == "AIAssistant:Id"

  def test_load_entries(self):
    manager = PrefixSecretManager("app")
    entries = [
      ("app-AIAssistant--EndPoint", "https://example.openai.azure.com/"),
      ("app-AIAssistant--Key", "secret"),
      ("other-AIAssistant--Id", "ignored"),
    ]
    assert manager.load_entries(entries) == {
      "AIAssistant:EndPoint": "https://example.openai.azure.com/",
      "AIAssistant:Key": "secret",
    }


class TestAssistantSecrets:

  def test_from_configuration(self):
    secrets = AssistantSecrets.from_configuration({
      "AIAssistant:EndPoint": " https://example.openai.azure.com/ ",
      "AIAssistant:Key": "secret",
      "AIAssistant:Id": "asst_1",
      "Other:Id": "nope",
    })
    assert secrets.endpoint == "https://example.openai.azure.com/"
    assert secrets.key == "secret"
    assert secrets.id == "asst_1"
    assert secrets.is_complete()

  def test_blank_values_become_none(self):
    secrets = AssistantSecrets.from_configuration({"AIAssistant:EndPoint": "   ", "AIAssistant:Key": "k"})
    assert secrets.endpoint is None
    assert secrets.id is None
    assert not secrets.is_complete()

  def test_custom_section(self):
    secrets = AssistantSecrets.from_configuration({"Bot:EndPoint": "https://x.test", "Bot:Key": "k", "Bot:Id": "i"}, section="Bot")
    assert secrets.is_complete()

  def test_immutable(self):
    secrets = AssistantSecrets(endpoint="https://x.test", key="k", id="i")
    with pytest.raises(ValidationError):
      secrets.key = "other"
