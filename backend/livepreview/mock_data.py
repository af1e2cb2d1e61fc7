"""Fixture data exposed to snippets as `mockData`."""

MOCK_DATA = {
    "user": {
        "name": "John Doe",
        "email": "john.doe@example.com",
        "avatar": "/placeholder.svg?height=40&width=40",
        "initials": "JD",
        "bio": "Product designer based in San Francisco. I enjoy creating user-centric, delightful, and human experiences.",
        "location": "San Francisco, CA",
    },
    "products": [
        {
            "id": "prod_1",
            "name": "Mechanical Keyboard",
            "price": "$149.99",
            "description": "Premium mechanical keyboard with RGB lighting",
        },
        {
            "id": "prod_2",
            "name": "Wireless Mouse",
            "price": "$59.99",
            "description": "Ergonomic wireless mouse with long battery life",
        },
        {
            "id": "prod_3",
            "name": "Monitor Stand",
            "price": "$29.99",
            "description": "Adjustable monitor stand for better ergonomics",
        },
    ],
    "posts": [
        {
            "id": 1,
            "title": "Getting Started with React",
            "excerpt": "Learn the basics of React and how to build your first component.",
            "date": "2023-05-15",
            "author": "Jane Smith",
        },
        {
            "id": 2,
            "title": "Advanced State Management",
            "excerpt": "Explore different state management solutions for complex React applications.",
            "date": "2023-06-22",
            "author": "Mike Johnson",
        },
        {
            "id": 3,
            "title": "Building Accessible UIs",
            "excerpt": "Best practices for creating accessible user interfaces in React.",
            "date": "2023-07-10",
            "author": "Sarah Williams",
        },
    ],
    "notifications": [
        {
            "id": "notif_1",
            "title": "New message",
            "description": "You have a new message from Alex",
            "time": "2 min ago",
        },
        {
            "id": "notif_2",
            "title": "Payment successful",
            "description": "Your payment of $49.99 was successful",
            "time": "1 hour ago",
        },
        {
            "id": "notif_3",
            "title": "Account update",
            "description": "Your account details have been updated",
            "time": "Yesterday",
        },
    ],
}
