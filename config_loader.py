# config_loader.py
import os
import json
import logging

from processors.compositor import CENTERING_MODES

logger = logging.getLogger("config_loader")

DEFAULTS = {
    "server": {
        "host": "0.0.0.0",
        "port": 8080,
        "debug": False,
        "max_upload_bytes": 10 << 20,
    },
    "logging": {"level": "INFO"},
    "qr": {"max_size": 4096},
    "overlay": {"centering": "center"},
}

def load_json(path):
    """Carga un archivo JSON y devuelve un dict."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)

def merge_dict(base, override):
    """
    Mezcla dos diccionarios de forma recursiva.
    - base: dict original
    - override: dict con valores que sobrescriben
    """
    result = base.copy()
    for k, v in override.items():
        if isinstance(v, dict) and k in result and isinstance(result[k], dict):
            result[k] = merge_dict(result[k], v)
        else:
            result[k] = v
    return result

def _env_bool(value):
    return str(value).strip().lower() in ("1", "true", "yes", "on")

def apply_env_overrides(config):
    """
    Reemplaza valores de config con variables de entorno si existen.
    Ejemplo:
      config["server"]["port"] = int(os.getenv("QR_PORT", valor_actual))
    """
    server = dict(config.get("server", {}))
    server["host"] = os.getenv("QR_HOST", server.get("host"))
    server["port"] = int(os.getenv("QR_PORT", server.get("port")))
    if os.getenv("QR_DEBUG") is not None:
        server["debug"] = _env_bool(os.getenv("QR_DEBUG"))
    config["server"] = server

    log_cfg = dict(config.get("logging", {}))
    log_cfg["level"] = os.getenv("QR_LOG_LEVEL", log_cfg.get("level"))
    config["logging"] = log_cfg

    qr = dict(config.get("qr", {}))
    qr["max_size"] = int(os.getenv("QR_MAX_SIZE", qr.get("max_size")))
    config["qr"] = qr

    overlay = dict(config.get("overlay", {}))
    overlay["centering"] = os.getenv("QR_OVERLAY_CENTERING", overlay.get("centering"))
    config["overlay"] = overlay
    return config

def _validate(config):
    overlay = config["overlay"]
    if overlay.get("centering") not in CENTERING_MODES:
        logger.warning("Modo de centrado desconocido %r, usando 'center'", overlay.get("centering"))
        overlay["centering"] = "center"
    return config

def load_config(settings_path="settings.json", override_path=None):
    """
    Carga la configuración completa:
      1. valores por defecto (DEFAULTS)
      2. settings.json (si existe)
      3. override (si se pasa)
      4. variables de entorno
    """
    config = merge_dict(DEFAULTS, {})

    if settings_path and os.path.exists(settings_path):
        config = merge_dict(config, load_json(settings_path))
    elif settings_path:
        logger.debug("No existe %s, usando valores por defecto", settings_path)

    if override_path:
        override = load_json(override_path)
        config = merge_dict(config, override)

    config = apply_env_overrides(config)
    return _validate(config)
