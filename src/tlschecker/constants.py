from OpenSSL import SSL

__module__ = "tlschecker.constants"

DEFAULT_PORT = 443
DEFAULT_TIMEOUT = 10
DISPLAY_DATE_FMT = r"%Y-%m-%d %H:%M:%S"

TLS1_0_LABEL = "TLS 1.0"
TLS1_1_LABEL = "TLS 1.1"
TLS1_2_LABEL = "TLS 1.2"
TLS1_3_LABEL = "TLS 1.3"

OPENSSL_VERSION_LOOKUP = {
    "TLSv1": SSL.TLS1_VERSION,
    "TLSv1.1": SSL.TLS1_1_VERSION,
    "TLSv1.2": SSL.TLS1_2_VERSION,
    "TLSv1.3": SSL.TLS1_3_VERSION,
}
PROTOCOL_LABEL = {
    "TLSv1": TLS1_0_LABEL,
    "TLSv1.1": TLS1_1_LABEL,
    "TLSv1.2": TLS1_2_LABEL,
    "TLSv1.3": TLS1_3_LABEL,
}
PROTOCOL_VERSION = {
    "TLSv1": 0x0301,
    "TLSv1.1": 0x0302,
    "TLSv1.2": 0x0303,
    "TLSv1.3": 0x0304,
}
WEAK_PROTOCOL = {
    "TLSv1": "TLS 1.0 was deprecated by RFC 8996 in 2021",
    "TLSv1.1": "TLS 1.1 was deprecated by RFC 8996 in 2021",
}
# @SECLEVEL=0 keeps the local OpenSSL build from refusing legacy versions
# before a ClientHello is ever sent
PROBE_CIPHER_LIST = b"ALL:@SECLEVEL=0"

MAX_DISPLAY_CIPHERS = 8
MAX_DISPLAY_TEXT = 50

CLI_COLOR_PRIMARY = "cyan"
CLI_COLOR_PASS = "dark_sea_green2"
CLI_COLOR_FAIL = "light_coral"
CLI_COLOR_WARN = "khaki1"
CLI_COLOR_INFO = "deep_sky_blue2"

RESULT_LEVEL_PASS = "pass"
RESULT_LEVEL_FAIL = "fail"
RESULT_LEVEL_WARN = "warn"
RESULT_LEVEL_INFO = "info"
RESULT_LEVEL_PASS_DEFAULT = "PASS!"
RESULT_LEVEL_FAIL_DEFAULT = "FAIL!"
RESULT_LEVEL_WARN_DEFAULT = "WARN!"
RESULT_LEVEL_INFO_DEFAULT = "INFO!"

CLI_COLOR_MAP = {
    RESULT_LEVEL_PASS: CLI_COLOR_PASS,
    RESULT_LEVEL_FAIL: CLI_COLOR_FAIL,
    RESULT_LEVEL_WARN: CLI_COLOR_WARN,
    RESULT_LEVEL_INFO: CLI_COLOR_INFO,
}
DEFAULT_MAP = {
    RESULT_LEVEL_PASS: RESULT_LEVEL_PASS_DEFAULT,
    RESULT_LEVEL_FAIL: RESULT_LEVEL_FAIL_DEFAULT,
    RESULT_LEVEL_WARN: RESULT_LEVEL_WARN_DEFAULT,
    RESULT_LEVEL_INFO: RESULT_LEVEL_INFO_DEFAULT,
}
CLI_ICON_MAP = {
    RESULT_LEVEL_PASS: ":white_heavy_check_mark:",
    RESULT_LEVEL_FAIL: ":cross_mark:",
    RESULT_LEVEL_WARN: ":bell:",
    RESULT_LEVEL_INFO: ":speech_balloon:",
}
# substring match, first hit wins
CIPHER_COLOR_MAP = [
    (("AES_256", "AES256"), "bright_green"),
    (("AES_128", "AES128"), "green"),
    (("3DES", "DES-CBC3"), "yellow"),
    (("RC4",), "red"),
]
