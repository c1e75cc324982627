from flask import current_app


def get_gateway():
    return current_app.extensions['duoparty.gateway']
