import os

_FRONTEND_URLS = {
    'production': 'https://frontend-phi-three-71.vercel.app',
    'development': 'http://localhost:5173',
}


def _deployment_mode() -> str:
    mode = os.environ.get('APP_ENV') or os.environ.get('FLASK_ENV') or 'development'
    return 'production' if mode.lower() == 'production' else 'development'


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    APP_ENV = _deployment_mode()
    # Origin permitted to open connections, picked by deployment mode
    FRONTEND_URL = os.environ.get('FRONTEND_URL') or _FRONTEND_URLS[APP_ENV]
    CORS_ORIGINS = [FRONTEND_URL]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Game rules
    CODE_LENGTH = int(os.environ.get('CODE_LENGTH', '4'))
    MAX_ATTEMPTS = int(os.environ.get('MAX_ATTEMPTS', '10'))
