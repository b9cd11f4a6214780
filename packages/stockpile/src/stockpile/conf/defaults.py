"""Default configuration values for stockpile."""

DEFAULTS: dict[str, object] = {
    # hashlib algorithm used to digest registry keys
    "KEY_DIGEST": "sha256",
    # "deep" -> copy.deepcopy, "shallow" -> copy.copy for Factory.new()
    "CLONE_MODE": "deep",
    # When True, string type names must import; otherwise the name is used as-is
    # for key derivation and only construction fails.
    "STRICT_TYPE_IDS": False,
}
