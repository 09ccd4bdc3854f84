"""Unit tests for the service_info AWS Lambda handler.

Test coverage includes:
    1. Service descriptor
       - Ensures GET / answers HTTP 200 with message, version and endpoints.
    2. Short URL listing
       - Ensures GET /shorturls answers HTTP 405 with usage hint and Allow header.
"""

import json

import pytest

from urlshortener.lambdas.service_info import app


@pytest.fixture()
def apigw_event():
    def _event(resource='/', method='GET'):
        return {
            'resource': resource,
            'path': resource,
            'httpMethod': method,
            'headers': {'User-Agent': 'pytest'},
            'requestContext': {'domainName': 'testhost:1000', 'stage': 'test'},
        }

    return _event


# -------------------------------
# 1. Service descriptor
# -------------------------------


def test_lambda_handler_describes_service(apigw_event):
    response = app.lambda_handler(apigw_event(), None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert response['headers']['Content-Type'] == 'application/json'
    assert body == {
        'message': 'URL Shortener Microservice',
        'version': '1.0.0',
        'endpoints': {
            'POST /shorturls': 'Create a short URL',
            'GET /shorturls/{shortcode}': 'Get URL statistics',
            'GET /{shortcode}': 'Redirect to original URL',
            'GET /health': 'Health check',
        },
    }


def test_lambda_handler_without_resource():
    assert app.lambda_handler({}, None)['statusCode'] == 200


# -------------------------------
# 2. Short URL listing
# -------------------------------


@pytest.mark.parametrize('resource', ['/shorturls', '/shorturls/'])
def test_lambda_handler_rejects_listing(apigw_event, resource):
    response = app.lambda_handler(apigw_event(resource), None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 405
    assert response['headers']['Allow'] == 'POST'
    assert body == {
        'message': (
            'Method Not Allowed (Use POST /shorturls to create a short URL '
            'or GET /shorturls/{shortcode} for stats)'
        ),
        'errorCode': 'METHOD_NOT_ALLOWED',
    }
