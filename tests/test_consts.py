from taskboard_client.consts import (
    ACCESS_TOKEN_KEY,
    CLIENT_NAME,
    PACKAGE_VERSION,
    REFRESH_TOKEN_KEY,
    REFRESH_URL_PATH,
    TOKEN_URL_PATH,
    USER_AGENT,
)


class TestPackageConstants:
    """Test package constants are properly defined"""

    def test_package_version_defined(self):
        """Test that package version is defined"""
        assert isinstance(PACKAGE_VERSION, str)
        assert "." in PACKAGE_VERSION  # Should be semantic version

    def test_user_agent_format(self):
        """Test that user agent follows expected format"""
        assert USER_AGENT == f"{CLIENT_NAME}/{PACKAGE_VERSION}"

    def test_url_path_constants(self):
        """Test that URL path constants are properly defined"""
        assert TOKEN_URL_PATH.startswith("/")
        assert REFRESH_URL_PATH.startswith(TOKEN_URL_PATH)
        assert "refresh" in REFRESH_URL_PATH

    def test_store_keys_distinct(self):
        assert ACCESS_TOKEN_KEY != REFRESH_TOKEN_KEY
