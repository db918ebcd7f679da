"""Local run of the primary -> fallback -> degraded chain.

In AWS the Step Functions state machine does this hand-off; here each tier's
raised error simply moves us to the next tier.
"""
import json

from bedrock_router.lambdas import degradation_lambda, fallback_lambda, primary_lambda


def handler(event, context):
    for tier in (primary_lambda, fallback_lambda):
        try:
            return tier.lambda_handler(event, context)
        except Exception as e:
            print(f"{tier.__name__} failed: {e}")
    return degradation_lambda.lambda_handler(event, context)


if __name__ == "__main__":
    sample_event = {
        "prompt": "What is a 401(k) retirement plan?",
        "use_case": "product_question",
    }
    print(json.dumps(handler(sample_event, None), indent=2))

    sample_event_1 = {
        "body": json.dumps({"prompt": "How do I reset my password?", "use_case": "account_inquiry"}),
        "httpMethod": "POST",
        "path": "/chat",
    }
    print(json.dumps(handler(sample_event_1, None), indent=2))
