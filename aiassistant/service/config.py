import logging
LOGGER = logging.getLogger(__name__)

from dotenv import load_dotenv
import os
import atexit
import json
import base64
from typing import Dict
from google.cloud import secretmanager
from google.oauth2 import service_account
from aiassistant.service.cache import assistant_cache
from aiassistant.service.secrets import PrefixSecretManager, AssistantSecrets, KEY_DELIMITER
import google.auth

load_dotenv()

ENV_SEPARATOR = "__"


class Config:

    secrets = None

    # Configuration is layered: environment first, then vault secrets on top.
    # The vault is only consulted when GCP credentials or a project are configured.
    def __init__(self):
        self.secrets_prefix = os.getenv('SECRETS_PREFIX', 'aiassistant')
        self.secret_manager = PrefixSecretManager(self.secrets_prefix)
        self.configuration = self._load_environment()

        if self._vault_enabled():
            try:
                self._connect_vault()
                self.configuration.update(self.load_vault_secrets())
            except Exception as e:
                LOGGER.error(f"Error loading secrets from vault, continuing with environment only: {e}")
                self._close_vault()

        atexit.register(self.close)
        LOGGER.info(f"Created Config instance with {len(self.configuration)} configuration keys")

    def close(self):
        LOGGER.info("Closing Config instance")
        self._close_vault()

    def _close_vault(self):
        try:
            if self.secrets is not None:
                self.secrets.transport.close()
        except Exception as e:
            LOGGER.error(f"Error closing secret manager client {e}")
        finally:
            self.secrets = None

    def _vault_enabled(self) -> bool:
        flag = os.getenv('SECRETS_VAULT_ENABLED')
        if flag is not None:
            return flag.lower() in ['true', '1', 'yes', 'on']
        return any(var in os.environ for var in ('GCLOUD_SA_CREDS_STRING', 'GCLOUD_SA_CREDS_PATH', 'GCLOUD_PROJECT_ID'))

    def _connect_vault(self):
        if 'GCLOUD_SA_CREDS_STRING' in os.environ:
            sa_creds_base64 = os.getenv("GCLOUD_SA_CREDS_STRING") # this is a base64 string
            sa_creds = base64.b64decode(sa_creds_base64).decode("utf-8")
            self.credentials = service_account.Credentials.from_service_account_info(json.loads(sa_creds))
            self.gcp_project_id = os.getenv('GCLOUD_PROJECT_ID', self.credentials.project_id)
            LOGGER.info(f"Using GCLOUD credentials from GCLOUD_SA_CREDS_STRING for project_id: {self.gcp_project_id}")
        elif 'GCLOUD_SA_CREDS_PATH' in os.environ:
            sa_creds_path = os.getenv('GCLOUD_SA_CREDS_PATH')
            self.credentials = service_account.Credentials.from_service_account_file(sa_creds_path)
            self.gcp_project_id = os.getenv('GCLOUD_PROJECT_ID', self.credentials.project_id)
            LOGGER.info(f"Using GCLOUD credentials from GCLOUD_SA_CREDS_PATH for project_id: {self.gcp_project_id}")
        else:
            self.credentials, project_id = google.auth.default()
            self.gcp_project_id = os.getenv('GCLOUD_PROJECT_ID', project_id)
            LOGGER.info(f"Using GCLOUD default credentials for project_id: {self.gcp_project_id}")
        self.secrets = secretmanager.SecretManagerServiceClient(credentials=self.credentials)

    def _load_environment(self) -> Dict[str, str]:
        """
        Environment variables such as AIAssistant__EndPoint map to the
        same hierarchical keys as vault secrets (AIAssistant:EndPoint).
        """
        configuration = {}
        for name, value in os.environ.items():
            if ENV_SEPARATOR in name:
                configuration[name.replace(ENV_SEPARATOR, KEY_DELIMITER)] = value
        return configuration

    def load_vault_secrets(self) -> Dict[str, str]:
        parent = f"projects/{self.gcp_project_id}"
        entries = []
        for secret in self.secrets.list_secrets(request={"parent": parent}):
            name = secret.name.rsplit("/", 1)[-1]
            if not self.secret_manager.load(name):
                continue
            response = self.secrets.access_secret_version(name=f"{secret.name}/versions/latest")
            entries.append((name, response.payload.data.decode("UTF-8")))
        loaded = self.secret_manager.load_entries(entries)
        LOGGER.info(f"Loaded {len(loaded)} secrets with prefix '{self.secrets_prefix}' from {parent}")
        return loaded

    def get_assistant_secrets(self) -> AssistantSecrets:
        return AssistantSecrets.from_configuration(self.configuration, section=os.getenv('ASSISTANT_CONFIG_SECTION', 'AIAssistant'))

    def get_poll_settings(self) -> dict:
        max_attempts = os.getenv('ASSISTANT_MAX_POLL_ATTEMPTS')
        timeout = os.getenv('ASSISTANT_POLL_TIMEOUT_SECONDS')
        return {
            'poll_interval': float(os.getenv('ASSISTANT_POLL_INTERVAL_SECONDS', 0.5)),
            'max_poll_attempts': int(max_attempts) if max_attempts else None,
            'poll_timeout': float(timeout) if timeout else None,
        }

    def get_cors_origins(self) -> list:
        cors_origins_str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost,http://localhost:5000,http://localhost:3000")
        origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]
        frontend_url = os.getenv("FRONTEND_URL")
        if frontend_url and frontend_url not in origins:
            origins.append(frontend_url)
        return origins

    @classmethod
    @assistant_cache
    def config(cls):
        return Config()
