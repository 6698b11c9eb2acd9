# Copyright 2026 UCP Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Inline Jinja2 templates for the checkout form and the result screen.

The browser side is limited to what the hosted widget needs: inject the
provider script, open the widget with the server-built options and post the
widget's callbacks back to /checkout/widget/*.
"""

from jinja2 import DictLoader, Environment, select_autoescape


STYLES = """
<style>
    :root {
        --primary-color: #4C5FD5;
        --primary-hover: #5B6FE8;
        --bg-color: #F5F5F5;
        --card-bg: #ffffff;
        --text-primary: #333333;
        --text-secondary: #6B7280;
        --border-color: #D1D5DB;
        --success-color: #0E9F6E;
        --warning-color: #FF9800;
        --error-color: #DC2626;
    }

    * {
        margin: 0;
        padding: 0;
        box-sizing: border-box;
    }

    body {
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
        background: var(--bg-color);
        color: var(--text-primary);
        line-height: 1.6;
        min-height: 100vh;
    }

    .hero {
        background: linear-gradient(135deg, var(--primary-color) 0%, var(--primary-hover) 100%);
        padding: 60px 20px;
        text-align: center;
        color: white;
    }

    .hero h1 {
        font-size: 32px;
        font-weight: 600;
        line-height: 1.3;
    }

    .hero .stats {
        font-size: 14px;
        margin: 20px 0;
        opacity: 0.95;
    }

    .hero .badges {
        display: flex;
        justify-content: center;
        gap: 20px;
        flex-wrap: wrap;
        font-size: 14px;
    }

    .container {
        max-width: 800px;
        margin: -30px auto 40px;
        padding: 0 20px;
    }

    .card {
        background: var(--card-bg);
        border-radius: 8px;
        padding: 40px;
        box-shadow: 0 2px 8px rgba(0,0,0,0.1);
    }

    .card h2 {
        font-size: 20px;
        font-weight: 600;
        margin-bottom: 30px;
    }

    .form-group {
        margin-bottom: 20px;
    }

    .form-group input {
        width: 100%;
        padding: 14px 16px;
        border: 1px solid var(--border-color);
        border-radius: 4px;
        font-size: 15px;
        transition: border-color 0.2s;
    }

    .form-group input:focus {
        outline: none;
        border-color: var(--primary-color);
    }

    .summary-row {
        display: flex;
        justify-content: space-between;
        padding: 12px 0;
        border-bottom: 1px solid #E5E7EB;
        font-size: 15px;
    }

    .summary-row.head {
        font-size: 13px;
        color: var(--text-secondary);
        text-transform: uppercase;
    }

    .summary-row.total {
        font-weight: 600;
        border-bottom: none;
        margin-bottom: 30px;
    }

    .summary-row.total span:last-child {
        color: var(--primary-color);
    }

    .btn {
        display: block;
        width: 100%;
        padding: 16px 24px;
        border: none;
        border-radius: 6px;
        font-size: 17px;
        font-weight: 600;
        cursor: pointer;
        transition: all 0.2s;
    }

    .btn-primary {
        background: var(--primary-color);
        color: white;
    }

    .btn-primary:hover {
        background: var(--primary-hover);
    }

    .btn-primary:disabled {
        background: var(--text-secondary);
        cursor: not-allowed;
    }

    .fine-print {
        font-size: 12px;
        color: var(--text-secondary);
        text-align: center;
        margin-top: 16px;
    }

    .message-error {
        padding: 12px 16px;
        border-radius: 8px;
        font-size: 14px;
        margin-bottom: 20px;
        background: #fef2f2;
        color: var(--error-color);
        border: 1px solid #fecaca;
    }

    .result {
        max-width: 480px;
        margin: 80px auto;
        text-align: center;
    }

    .result h2 {
        margin: 20px 0 10px;
    }

    .result .icon-success { color: var(--success-color); font-size: 45px; }
    .result .icon-failed { color: var(--error-color); font-size: 45px; }

    .result .panel {
        background: var(--bg-color);
        border-radius: 8px;
        padding: 20px;
        margin: 20px 0;
        text-align: left;
    }

    .result .label {
        font-size: 13px;
        color: var(--text-secondary);
    }

    .result .value {
        font-size: 16px;
        font-weight: 600;
    }

    .result .value.next-debit {
        color: var(--warning-color);
    }

    @media (max-width: 768px) {
        .hero h1 { font-size: 24px; }
    }
</style>
"""


SCRIPT = """
<script>
    const Checkout = {
        async post(path, body) {
            const response = await fetch(path, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(body || {})
            });
            return response.json();
        },

        loadScript(src) {
            return new Promise((resolve) => {
                const script = document.createElement('script');
                script.src = src;
                script.onload = () => resolve(true);
                script.onerror = () => resolve(false);
                document.body.appendChild(script);
            });
        },

        async openWidget(options) {
            const loaded = await this.loadScript({{ sdk_url | tojson }});
            if (!loaded) {
                const state = await this.post('/checkout/widget/sdk-error');
                alert(state.alert);
                window.location.reload();
                return;
            }
            options.handler = (response) => {
                this.post('/checkout/widget/success', response).then(() => window.location.reload());
            };
            options.modal = {
                ondismiss: () => {
                    this.post('/checkout/widget/dismiss').then(() => window.location.reload());
                }
            };
            new window.Razorpay(options).open();
        },

        async restart() {
            await this.post('/checkout/restart');
            window.location.href = '/';
        }
    };
</script>
"""


TEMPLATES = {
    "styles.html": STYLES,
    "script.html": SCRIPT,
    "checkout.html": """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Checkout - {{ constants.WIDGET_DISPLAY_NAME }}</title>
    {% include "styles.html" %}
</head>
<body>
    <div class="hero">
        <h1>Congrats! You are just one step away from Smart<br>Business Bookkeeping Sheet</h1>
        <p class="stats">36,856 sales | Excellent 4.9 of 5 | Recently Updated</p>
        <div class="badges">
            <span>Secured Checkout</span>
            <span>24/7 Support Available</span>
            <span>Instant Access</span>
        </div>
    </div>

    <div class="container">
        <div class="card">
            {% if state.alert %}
            <div class="message-error" id="alert">{{ state.alert }}</div>
            {% endif %}

            <h2>Billing details</h2>
            <form id="checkoutForm" novalidate>
                <div class="form-group">
                    <input type="text" name="name" value="{{ state.form.name }}" placeholder="Name *">
                </div>
                <div class="form-group">
                    <input type="tel" name="phone" value="{{ state.form.phone }}" placeholder="Phone *">
                </div>
                <div class="form-group">
                    <input type="email" name="email" value="{{ state.form.email }}" placeholder="Email address *">
                </div>

                <h2>Order summary</h2>
                <div class="summary-row head"><span>Product</span><span>Price</span></div>
                <div class="summary-row">
                    <span>{{ constants.PRODUCT_NAME }}</span>
                    <span>{{ constants.PRODUCT_PRICE }}</span>
                </div>
                <div class="summary-row total">
                    <span>Amount Charged</span>
                    <span>{{ constants.PRODUCT_PRICE }}</span>
                </div>

                <button id="payBtn" type="submit" class="btn btn-primary" {% if state.loading %}disabled{% endif %}>
                    {% if state.loading %}Processing...{% else %}Pay {{ constants.PRODUCT_PRICE }}{% endif %}
                </button>
            </form>

            <div class="fine-print">
                By proceeding, you authorize {{ constants.PRODUCT_PRICE }} charge today and monthly auto-debit of {{ constants.PRODUCT_PRICE }}.
                <br>Cancel subscription anytime. Secured by {{ constants.PROVIDER_NAME }}.
            </div>
        </div>
    </div>

    {% include "script.html" %}
    <script>
        const form = document.getElementById('checkoutForm');
        const payBtn = document.getElementById('payBtn');

        form.addEventListener('submit', async (e) => {
            e.preventDefault();
            payBtn.disabled = true;
            payBtn.textContent = 'Processing...';

            const data = new FormData(form);
            const state = await Checkout.post('/checkout/pay', {
                name: data.get('name'),
                email: data.get('email'),
                phone: data.get('phone')
            });

            if (state.widget) {
                Checkout.openWidget(state.widget);
                return;
            }
            if (state.alert) {
                alert(state.alert);
            }
            payBtn.disabled = state.loading;
            payBtn.textContent = state.loading ? 'Processing...' : 'Pay {{ constants.PRODUCT_PRICE }}';
        });

        {% if state.widget %}
        Checkout.openWidget({{ state.widget | tojson }});
        {% endif %}
    </script>
</body>
</html>
""",
    "result.html": """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{% if state.status.value == 'success' %}Payment Successful{% else %}Payment Failed{% endif %}</title>
    {% include "styles.html" %}
</head>
<body>
    <div class="result card">
        {% if state.status.value == 'success' %}
        <div class="icon-success">&#10004;</div>
        <h2>Payment Successful!</h2>
        <p>{{ constants.PRODUCT_PRICE }} charged successfully. Auto-pay mandate of {{ constants.PRODUCT_PRICE }}/month is now active.</p>

        <div class="panel">
            <div class="label">&#10003; Today's payment</div>
            <div class="value">{{ constants.PRODUCT_PRICE }} charged</div>
            <div class="label">&#10227; Next auto-debit</div>
            <div class="value next-debit" id="nextBillingDate">{{ billing_date }}</div>
        </div>

        <div class="panel">
            <div class="label">File sent to:</div>
            <div class="value">{{ state.form.email }}</div>
        </div>
        {% else %}
        <div class="icon-failed">&#10008;</div>
        <h2>Payment Failed</h2>
        <p>Your payment could not be processed. Please try again.</p>
        {% endif %}

        <button class="btn btn-primary" onclick="Checkout.restart()">Back to Home</button>
    </div>

    {% include "script.html" %}
    {% if state.redirect %}
    <script>
        setTimeout(() => {
            window.location.href = {{ state.redirect.url | tojson }};
        }, {{ state.redirect.delay_ms }});
    </script>
    {% endif %}
</body>
</html>
""",
}


env = Environment(loader=DictLoader(TEMPLATES), autoescape=select_autoescape(["html"]))


def render_template(name: str, **context) -> str:
    return env.get_template(name).render(**context)
