"""Canned backend responses used in mock mode."""

from __future__ import annotations

UPLOAD_RESULT = {
    "merchant": "Mock Store",
    "purchaseDate": "2024-01-15",
    "items": [{"itemName": "Mock Item", "itemCost": 10.99}],
    "totalItems": 1,
    "processingTimeMs": 1200,
}

WEEKLY_PURCHASES = {
    "weekStart": "2025-10-26",
    "weekEnd": "2025-11-01",
    "totalAmount": 130.87,
    "daysWithPurchases": 3,
    "totalDays": 7,
    "purchases": {
        "2025-10-28": [
            {
                "receiptId": "mock-receipt-2",
                "merchant": "Corner Pharmacy",
                "total": -10.00,
                "timestamp": "2025-10-28T15:20:00.000Z",
                "items": [
                    {"itemId": "mock-item-2-1", "itemName": "Returned Sunscreen", "itemCost": -10.00},
                ],
            },
        ],
        "2025-10-30": [
            {
                "receiptId": "mock-receipt-1",
                "merchant": "Woolworths",
                "total": 85.20,
                "timestamp": "2025-10-30T10:00:00.000Z",
                "items": [
                    {"itemId": "mock-item-1-1", "itemName": "Spicy Chicken Drumsticks 3pk", "itemCost": 12.50},
                    {"itemId": "mock-item-1-2", "itemName": "Paseo 3 Ply T/tissue 24pk Value", "itemCost": 8.00},
                    {"itemId": "mock-item-1-3", "itemName": "S/Magnum Honeycomb Crunch 4pk", "itemCost": 9.70},
                    {"itemId": "mock-item-1-4", "itemName": "Weekly Groceries", "itemCost": 55.00},
                ],
            },
        ],
        "2025-11-01": [
            {
                "receiptId": "mock-receipt-0",
                "merchant": "Weekend Store",
                "total": 55.67,
                "timestamp": "2025-11-01T09:00:00.000Z",
                "items": [
                    {"itemId": "mock-item-0-1", "itemName": "Weekend Special", "itemCost": 25.67},
                    {"itemId": "mock-item-0-2", "itemName": "Fresh Produce", "itemCost": 30.00},
                ],
            },
        ],
    },
}

YEARLY_SUMMARY = {
    "year": 2025,
    "summaries": [
        {"month": 1, "monthName": "January", "totalAmount": 1234.56, "receiptCount": 45, "itemCount": 234},
        {"month": 2, "monthName": "February", "totalAmount": 987.43, "receiptCount": 32, "itemCount": 189},
        {"month": 3, "monthName": "March", "totalAmount": 1500.00, "receiptCount": 50, "itemCount": 300},
        {"month": 10, "monthName": "October", "totalAmount": -50.00, "receiptCount": 2, "itemCount": 2},
        {"month": 11, "monthName": "November", "totalAmount": 250.75, "receiptCount": 10, "itemCount": 45},
    ],
}

MONTHLY_SUMMARY = {
    "year": 2025,
    "month": 11,
    "dailySummaries": [
        {"date": "2025-11-01", "dayName": "Saturday", "totalAmount": 45.67, "receiptCount": 2, "itemCount": 8},
        {"date": "2025-11-02", "dayName": "Sunday", "totalAmount": 0, "receiptCount": 0, "itemCount": 0},
        {"date": "2025-11-03", "dayName": "Monday", "totalAmount": 85.20, "receiptCount": 1, "itemCount": 3},
        {"date": "2025-11-04", "dayName": "Tuesday", "totalAmount": 0, "receiptCount": 0, "itemCount": 0},
        {"date": "2025-11-05", "dayName": "Wednesday", "totalAmount": 38.25, "receiptCount": 2, "itemCount": 5},
        {"date": "2025-11-06", "dayName": "Thursday", "totalAmount": -15.50, "receiptCount": 1, "itemCount": 1},
    ],
}

ITEM_STATS = [
    {"itemName": "Coffee Beans", "shortLabel": "Coffee Beans", "category": "Beverages", "totalSpent": 156.78, "purchaseCount": 23, "avgCost": 6.82, "lastPurchase": "2024-01-15T10:30:00", "monthlyBreakdown": {"2024-01": 45.67, "2024-02": 32.11}},
    {"itemName": "Milk", "shortLabel": "Milk", "category": "Dairy", "totalSpent": 89.45, "purchaseCount": 15, "avgCost": 5.96, "lastPurchase": "2024-01-14T08:20:00", "monthlyBreakdown": {"2024-01": 35.80, "2024-02": 23.65}},
    {"itemName": "Bread", "shortLabel": "Bread", "category": "Bakery", "totalSpent": 67.20, "purchaseCount": 12, "avgCost": 5.60, "lastPurchase": "2024-01-13T16:45:00", "monthlyBreakdown": {"2024-01": 28.00, "2024-02": 22.40}},
    {"itemName": "Eggs", "shortLabel": "Eggs", "category": "Dairy", "totalSpent": 45.30, "purchaseCount": 8, "avgCost": 5.66, "lastPurchase": "2024-01-12T11:15:00", "monthlyBreakdown": {"2024-01": 22.65, "2024-02": 11.33}},
    {"itemName": "Bananas", "shortLabel": "Bananas", "category": "Fruits", "totalSpent": 34.80, "purchaseCount": 10, "avgCost": 3.48, "lastPurchase": "2024-01-11T14:30:00", "monthlyBreakdown": {"2024-01": 17.40, "2024-02": 10.44}},
]

SUMMARY_STATS = {
    "totalSpent": 393.53,
    "totalUniqueItems": 5,
    "avgSpentPerItem": 78.71,
    "topItems": [
        {"shortLabel": i["shortLabel"], "totalSpent": i["totalSpent"], "purchaseCount": i["purchaseCount"]}
        for i in ITEM_STATS
    ],
}

CATEGORY_STATS = {
    "totalSpent": 393.53,
    "categories": [
        {
            "category": "Beverages",
            "totalSpent": 156.78,
            "itemCount": 1,
            "avgSpentPerItem": 156.78,
            "topItems": [{"shortLabel": "Coffee Beans", "totalSpent": 156.78}],
        },
        {
            "category": "Dairy",
            "totalSpent": 134.75,
            "itemCount": 2,
            "avgSpentPerItem": 67.38,
            "topItems": [
                {"shortLabel": "Milk", "totalSpent": 89.45},
                {"shortLabel": "Eggs", "totalSpent": 45.30},
            ],
        },
        {
            "category": "Bakery",
            "totalSpent": 67.20,
            "itemCount": 1,
            "avgSpentPerItem": 67.20,
            "topItems": [{"shortLabel": "Bread", "totalSpent": 67.20}],
        },
        {
            "category": "Fruits",
            "totalSpent": 34.80,
            "itemCount": 1,
            "avgSpentPerItem": 34.80,
            "topItems": [{"shortLabel": "Bananas", "totalSpent": 34.80}],
        },
    ],
}

GLOBAL_ITEM_STATS = {
    "coffee beans": {
        "itemName": "Coffee Beans",
        "totalSpent": 48211.40,
        "totalPurchases": 7120,
        "avgCost": 6.77,
        "lastUpdated": "2025-11-01T00:00:00",
    },
    "milk": {
        "itemName": "Milk",
        "totalSpent": 30120.95,
        "totalPurchases": 5244,
        "avgCost": 5.74,
        "lastUpdated": "2025-11-01T00:00:00",
    },
}
