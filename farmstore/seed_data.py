# Demo catalog loaded by POST /seed and at startup.
# Products reference their category by name; seeding resolves it to an id.

DEMO_CATEGORIES = [
    {"name": "Leafy Greens", "description": "Traditional African leafy vegetables, harvested fresh."},
    {"name": "Vegetables", "description": "Seasonal vegetables from local smallholder farms."},
    {"name": "Grains & Flours", "description": "Millet, sorghum and other stone-ground staples."},
    {"name": "Fruits", "description": "Tree-ripened fruit from partner orchards."},
    {"name": "Tubers", "description": "Arrowroots, sweet potatoes and cassava."},
]

DEMO_PRODUCTS = [
    {
        "name": "Amaranth Greens (Terere)",
        "description": "Tender amaranth leaves, rich in iron. Sold per bunch.",
        "price_cents": 250,
        "image_url": "https://images.unsplash.com/photo-1540420773420-3366772f4999",
        "stock_quantity": 40,
        "category": "Leafy Greens",
    },
    {
        "name": "African Nightshade (Managu)",
        "description": "Slightly bitter traditional green, best sauteed with onions.",
        "price_cents": 300,
        "image_url": "https://images.unsplash.com/photo-1576045057995-568f588f82fb",
        "stock_quantity": 25,
        "category": "Leafy Greens",
    },
    {
        "name": "Cowpea Leaves (Kunde)",
        "description": "Young cowpea leaves, a staple green across East Africa.",
        "price_cents": 200,
        "image_url": "https://images.unsplash.com/photo-1515543237350-b3eea1ec8082",
        "stock_quantity": 4,
        "category": "Leafy Greens",
    },
    {
        "name": "Spider Plant (Saget)",
        "description": "Peppery spider plant leaves, organically grown.",
        "price_cents": 275,
        "image_url": "https://images.unsplash.com/photo-1471193945509-9ad0617afabf",
        "stock_quantity": 0,
        "category": "Leafy Greens",
    },
    {
        "name": "Collard Greens (Sukuma Wiki)",
        "description": "Hardy collard greens that stretch the week.",
        "price_cents": 150,
        "image_url": "https://images.unsplash.com/photo-1524179091875-bf99a9a6af57",
        "stock_quantity": 60,
        "category": "Leafy Greens",
    },
    {
        "name": "Pumpkin Leaves",
        "description": "Soft pumpkin leaves for stews and relishes.",
        "price_cents": 180,
        "image_url": "https://images.unsplash.com/photo-1506917728037-b6af01a7d403",
        "stock_quantity": 18,
        "category": "Vegetables",
    },
    {
        "name": "Okra",
        "description": "Fresh green okra pods, 500g.",
        "price_cents": 320,
        "image_url": "https://images.unsplash.com/photo-1425543103986-22abb7d7e8d2",
        "stock_quantity": 30,
        "category": "Vegetables",
    },
    {
        "name": "Finger Millet Flour",
        "description": "Stone-ground finger millet flour for porridge and ugali, 1kg.",
        "price_cents": 650,
        "image_url": "https://images.unsplash.com/photo-1586201375761-83865001e31c",
        "stock_quantity": 22,
        "category": "Grains & Flours",
    },
    {
        "name": "Red Sorghum",
        "description": "Whole red sorghum grain, drought-hardy and gluten free, 1kg.",
        "price_cents": 480,
        "image_url": "https://images.unsplash.com/photo-1574323347407-f5e1ad6d020b",
        "stock_quantity": 3,
        "category": "Grains & Flours",
    },
    {
        "name": "Apple Mangoes",
        "description": "Sweet apple mangoes, tray of six.",
        "price_cents": 900,
        "image_url": "https://images.unsplash.com/photo-1553279768-865429fa0078",
        "stock_quantity": 12,
        "category": "Fruits",
    },
    {
        "name": "Arrowroots (Nduma)",
        "description": "Purple arrowroots, steamed or boiled for breakfast, 1kg.",
        "price_cents": 550,
        "image_url": "https://images.unsplash.com/photo-1596097635121-14b63b7a0c19",
        "stock_quantity": 15,
        "category": "Tubers",
    },
    {
        "name": "Orange-Fleshed Sweet Potatoes",
        "description": "Vitamin A rich sweet potatoes, 2kg.",
        "price_cents": 420,
        "image_url": "https://images.unsplash.com/photo-1596097635121-14b63b7a0c19",
        "stock_quantity": 35,
        "category": "Tubers",
    },
]
