"""Paths, package sets and file modes used by the installer."""

DEFAULT_DB_NAME = "cacti"
DEFAULT_DB_USER = "cacti_user"
DEFAULT_DB_HOST = "localhost"

DEFAULT_WEB_ROOT = "/var/www/html"
DEFAULT_CACTI_DIR = "/var/www/html/cacti"
DEFAULT_WEB_USER = "www-data"
DEFAULT_WEB_GROUP = "www-data"
DEFAULT_LOG_FILE = "/var/log/cacti_install.log"
DEFAULT_TIMEZONE = "UTC"

CACTI_REPO_URL = "https://github.com/Cacti/cacti.git"
SPINE_REPO_URL = "https://github.com/Cacti/spine.git"

BASE_PACKAGES = [
    "wget",
    "git",
    "apache2",
    "mariadb-server",
    "ntp",
    "expect",
    "rrdtool",
    "fping",
]

PHP_PACKAGES = [
    "php",
    "php-cli",
    "php-fpm",
    "php-mysql",
    "php-xml",
    "php-gd",
    "php-snmp",
    "php-curl",
    "php-mbstring",
    "php-ldap",
    "php-zip",
    "php-bcmath",
    "php-soap",
    "php-gmp",
    "php-intl",
]

SPINE_BUILD_PACKAGES = [
    "help2man",
    "build-essential",
    "autoconf",
    "automake",
    "libtool",
    "pkg-config",
    "libmariadb-dev",
    "libsnmp-dev",
]

MIN_PHP_VERSION = "7.4"

DEFAULT_PHP_SETTINGS = {
    "memory_limit": "800M",
    "max_execution_time": "300",
    "collation_server": "utf8mb4_unicode_ci",
}

PHP_INI_ROOT = "/etc/php"
MARIADB_TUNING_FILE = "/etc/mysql/mariadb.conf.d/99-custom.cnf"
ZONEINFO_DIR = "/usr/share/zoneinfo"
MEMINFO_FILE = "/proc/meminfo"
BUFFER_POOL_PERCENT = 70

APACHE_SITES_DIR = "/etc/apache2/sites-available"
APACHE_SITE_NAME = "cacti.conf"
APACHE_DEFAULT_SITE = "000-default.conf"

SYSTEMD_UNIT_DIR = "/etc/systemd/system"
SYSCONFIG_DIR = "/etc/sysconfig"
SPINE_SOURCE_DIR = "/tmp/spine"
SPINE_BIN_DIR = "/usr/local/spine/bin"
SPINE_PROFILE_SCRIPT = "/etc/profile.d/spine.sh"

LOG_FILE_MODE = 0o600
DIR_MODE = 0o755
FILE_MODE = 0o644
CONFIG_MODE = 0o640
SCRIPT_MODE = 0o755
