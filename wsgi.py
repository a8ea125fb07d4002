from relay import create_app

# Fails fast with ConfigError when DISCORD_WEBHOOK_URL or PORT is invalid,
# so gunicorn never starts serving: gunicorn -w 4 -b 0.0.0.0:8080 wsgi:app
app = create_app()
