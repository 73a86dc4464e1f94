"""
Shared pytest fixtures for payload encryption tests.
"""

import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

KEY_STORE_ALIAS = "payload-encryption"
KEY_STORE_PASSWORD = "Password1"


@pytest.fixture(scope="session")
def rsa_key():
    """RSA key pair shared by the whole test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate(rsa_key):
    """Self-signed certificate for the session key pair."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "payload-encryption-test")])
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(rsa_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=365))
        .sign(rsa_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def key_files(tmp_path_factory, rsa_key, certificate):
    """Certificate and private key written in every supported container."""
    directory = tmp_path_factory.mktemp("keys")
    files = {
        "certificate_pem": directory / "test_certificate.cert",
        "certificate_der": directory / "test_certificate.der.cert",
        "key_der": directory / "test_key.der",
        "key_pem": directory / "test_key.pem",
        "key_p12": directory / "test_key_container.p12",
    }
    files["certificate_pem"].write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    files["certificate_der"].write_bytes(certificate.public_bytes(serialization.Encoding.DER))
    files["key_der"].write_bytes(
        rsa_key.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    files["key_pem"].write_bytes(
        rsa_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.TraditionalOpenSSL,
            serialization.NoEncryption(),
        )
    )
    files["key_p12"].write_bytes(
        pkcs12.serialize_key_and_certificates(
            KEY_STORE_ALIAS.encode(),
            rsa_key,
            certificate,
            None,
            serialization.BestAvailableEncryption(KEY_STORE_PASSWORD.encode()),
        )
    )
    return {name: str(path) for name, path in files.items()}


@pytest.fixture
def key_store():
    """Alias and password of the p12 key store in key_files."""
    return {"alias": KEY_STORE_ALIAS, "password": KEY_STORE_PASSWORD}


@pytest.fixture
def legacy_config(key_files):
    """Field level configuration with body-embedded metadata."""
    return {
        "paths": [
            {
                "path": "/resource",
                "toEncrypt": [{"element": "elem1.encryptedData", "obj": "elem1"}],
                "toDecrypt": [{"element": "elem1", "obj": "elem1.encryptedData"}],
            },
            {
                "path": "/mappings/*",
                "toEncrypt": [{"element": "elem2.encryptedData", "obj": "elem2"}],
                "toDecrypt": [{"element": "foo.elem1", "obj": "foo"}],
            },
            {
                "path": "/flat",
                "toEncrypt": [{"element": "elem1.encryptedData", "obj": "elem1"}],
                "toDecrypt": [{"element": "elem1.encryptedData", "obj": "elem1"}],
            },
            {
                "path": "/items",
                "toEncrypt": [{"element": "*.elem1", "obj": "*"}],
                "toDecrypt": [{"element": "*", "obj": "*.elem1"}],
            },
            {
                "path": "/array-resp$",
                "toEncrypt": [{"element": "$", "obj": "$"}],
                "toDecrypt": [{"element": "$", "obj": "$"}],
            },
            {
                "path": "/array-resp2",
                "toEncrypt": [{"element": "$", "obj": "$"}],
                "toDecrypt": [{"element": "$", "obj": "path.to.foo"}],
            },
            {
                "path": "/accounts",
                "toEncrypt": [{"element": "accounts.*", "obj": "accounts.*"}],
                "toDecrypt": [{"element": "accounts.*", "obj": "accounts.*"}],
            },
            {
                "path": "/relocate",
                "toEncrypt": [{"element": "a", "obj": "b.c"}],
                "toDecrypt": [{"element": "b.c", "obj": "a"}],
            },
        ],
        "oaepPaddingDigestAlgorithm": "SHA-512",
        "ivFieldName": "iv",
        "encryptedKeyFieldName": "encryptedKey",
        "encryptedValueFieldName": "encryptedData",
        "oaepHashingAlgorithmFieldName": "oaepHashingAlgorithm",
        "publicKeyFingerprintFieldName": "publicKeyFingerprint",
        "publicKeyFingerprintType": "certificate",
        "dataEncoding": "hex",
        "encryptionCertificate": key_files["certificate_pem"],
        "privateKey": key_files["key_der"],
    }


@pytest.fixture
def header_config(key_files):
    """Field level configuration with metadata carried in HTTP headers."""
    return {
        "paths": [
            {
                "path": "/resource",
                "toEncrypt": [{"element": "encrypted_payload.data", "obj": "encrypted_payload"}],
                "toDecrypt": [{"element": "encrypted_payload", "obj": "encrypted_payload.data"}],
            },
            {
                "path": "/array-resp",
                "toEncrypt": [{"element": "$", "obj": "$"}],
                "toDecrypt": [{"element": "$", "obj": "$"}],
            },
        ],
        "oaepPaddingDigestAlgorithm": "SHA-256",
        "encryptedValueFieldName": "data",
        "ivHeaderName": "x-iv",
        "encryptedKeyHeaderName": "x-encrypted-key",
        "oaepHashingAlgorithmHeaderName": "x-oaep-padding-digest-algorithm",
        "publicKeyFingerprintHeaderName": "x-encryption-key-fingerprint",
        "publicKeyFingerprintType": "certificate",
        "dataEncoding": "base64",
        "encryptionCertificate": key_files["certificate_pem"],
        "privateKey": key_files["key_der"],
    }


@pytest.fixture
def jwe_config(key_files):
    """JWE configuration."""
    return {
        "paths": [
            {
                "path": "/resource",
                "toEncrypt": [{"element": "elem1.encryptedData", "obj": "elem1"}],
                "toDecrypt": [{"element": "elem1", "obj": "elem1.encryptedData"}],
            },
            {
                "path": "/tokens",
                "toEncrypt": [{"element": "payload", "obj": "wrapper"}],
                "toDecrypt": [{"element": "encryptedData", "obj": "decryptedData"}],
            },
            {
                "path": "/items",
                "toEncrypt": [{"element": "*.elem1", "obj": "*"}],
                "toDecrypt": [{"element": "*", "obj": "*.elem1"}],
            },
            {
                "path": "/array-resp$",
                "toEncrypt": [{"element": "$", "obj": "$"}],
                "toDecrypt": [{"element": "$", "obj": "$"}],
            },
            {
                "path": "/array-resp2",
                "toEncrypt": [{"element": "$", "obj": "$"}],
                "toDecrypt": [{"element": "$", "obj": "path.to.foo"}],
            },
        ],
        "mode": "JWE",
        "encryptedValueFieldName": "encryptedData",
        "publicKeyFingerprintType": "certificate",
        "dataEncoding": "base64",
        "encryptionCertificate": key_files["certificate_pem"],
        "privateKey": key_files["key_der"],
    }
