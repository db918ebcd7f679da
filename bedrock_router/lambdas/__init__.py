"""Lambda entry modules. Each exposes `lambda_handler(event, context)`."""
