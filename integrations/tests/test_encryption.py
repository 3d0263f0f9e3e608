"""
Tests for credential encryption at rest.
"""

from django.test import override_settings

from integrations.encryption import (
    decrypt_credentials,
    encrypt_credentials,
    is_encrypted,
    mask_credentials,
)


class TestCredentialEncryption:
    """Test encrypt_credentials / decrypt_credentials."""

    def test_only_secure_keys_are_encrypted(self):
        encrypted = encrypt_credentials({'api_key': 'SG.key', 'from': 'a@example.com', 'region': 'eu'})

        assert is_encrypted(encrypted['api_key'])
        assert 'SG.key' not in encrypted['api_key']
        assert encrypted['from'] == 'a@example.com'
        assert encrypted['region'] == 'eu'

    def test_structured_secure_value_round_trip(self):
        credentials = {'service_account': {'project_id': 'p', 'private_key': 'pk'}}

        encrypted = encrypt_credentials(credentials)

        assert encrypted['service_account'].startswith('encj:')
        assert decrypt_credentials(encrypted) == credentials

    def test_input_is_not_mutated(self):
        credentials = {'password': 'hunter2'}
        encrypt_credentials(credentials)
        assert credentials == {'password': 'hunter2'}

    def test_already_encrypted_values_are_kept(self):
        once = encrypt_credentials({'token': 'abc'})
        twice = encrypt_credentials(once)
        assert twice == once
        assert decrypt_credentials(twice) == {'token': 'abc'}

    def test_plain_value_with_prefix_is_encrypted(self):
        encrypted = encrypt_credentials({'password': 'enc:hunter2'})

        assert encrypted['password'] != 'enc:hunter2'
        assert is_encrypted(encrypted['password'])
        assert not is_encrypted('enc:hunter2')
        assert decrypt_credentials(encrypted) == {'password': 'enc:hunter2'}

    def test_empty_values_are_not_encrypted(self):
        assert encrypt_credentials({'api_key': '', 'password': None}) == {'api_key': '', 'password': None}

    def test_value_from_another_key_is_returned_as_stored(self):
        with override_settings(CREDENTIALS_ENCRYPTION_KEY='first-key'):
            encrypted = encrypt_credentials({'api_key': 'secret'})
        with override_settings(CREDENTIALS_ENCRYPTION_KEY='second-key'):
            assert decrypt_credentials(encrypted) == encrypted

    def test_mask_hides_secure_values(self):
        masked = mask_credentials({'api_key': 'k', 'from': 'a@example.com', 'token': ''})
        assert masked == {'api_key': '********', 'from': 'a@example.com', 'token': ''}
