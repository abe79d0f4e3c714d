from html import escape


def get_feedback_email_template(
    order_id: str,
    vendor_name: str,
    delivery_date: str,
    rating: int,
    comments: str,
) -> str:
    """Feedback notice sent to the support inbox"""
    stars = "★" * rating + "☆" * (5 - rating)
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <style>
            body {{
                margin: 0;
                padding: 0;
                font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                background-color: #ffffff;
            }}
            .container {{
                max-width: 600px;
                margin: 0 auto;
                padding: 40px 20px;
            }}
            .content {{
                border: 1px solid #f0f0f0;
                border-radius: 12px;
                padding: 32px;
            }}
            h1 {{
                color: #1f2937;
                font-size: 22px;
                margin: 0 0 16px 0;
            }}
            .rating {{
                font-size: 28px;
                color: #f59e0b;
                letter-spacing: 4px;
            }}
            .comments {{
                background: #f9fafb;
                border-left: 4px solid #2563eb;
                padding: 16px 20px;
                border-radius: 4px;
                margin: 24px 0;
                color: #374151;
            }}
            td {{
                padding: 4px 12px 4px 0;
                color: #4b5563;
                font-size: 14px;
            }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="content">
                <h1>New order feedback</h1>
                <div class="rating">{stars}</div>
                <table>
                    <tr><td>Order</td><td><strong>{escape(order_id)}</strong></td></tr>
                    <tr><td>Vendor</td><td>{escape(vendor_name)}</td></tr>
                    <tr><td>Delivered</td><td>{escape(delivery_date)}</td></tr>
                    <tr><td>Rating</td><td>{rating} / 5</td></tr>
                </table>
                <div class="comments">{escape(comments)}</div>
            </div>
        </div>
    </body>
    </html>
    """
