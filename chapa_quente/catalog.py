"""Bundled default menu: first-run seed data and the storefront's offline fallback."""
from chapa_quente.models import ProductCategory

DEFAULT_STOCK = 50

DEFAULT_MENU = [
    {
        "name": "Clássico Imperial",
        "description": "Salsicha artesanal defumada, pão brioche tostado na manteiga, cebola caramelizada no vinho tinto, mostarda Dijon e ketchup trufado.",
        "price": 28.90,
        "image": "/classico_imperial.webp",
        "category": ProductCategory.HOT_DOG.value,
        "tags": ["Mais Vendido", "Chef"],
    },
    {
        "name": "Bacon Royale",
        "description": "Dupla de salsichas premium, bacon crocante defumado, queijo cheddar derretido e molho barbecue artesanal.",
        "price": 34.90,
        "image": "/bacon_royale.webp",
        "category": ProductCategory.HOT_DOG.value,
        "tags": ["Premium"],
    },
    {
        "name": "Vegetariano Gourmet",
        "description": "Salsicha vegetal premium, guacamole fresco, pico de gallo, sour cream e jalapeño em conserva.",
        "price": 32.90,
        "image": "/vegetariano_gourmet.webp",
        "category": ProductCategory.HOT_DOG.value,
        "tags": ["Veggie", "Novo"],
    },
    {
        "name": "Tropicália",
        "description": "Salsicha suína com abacaxi grelhado, coentro fresco, molho teriyaki caseiro e gergelim torrado.",
        "price": 31.90,
        "image": "/tropicalia.webp",
        "category": ProductCategory.HOT_DOG.value,
        "tags": ["Tropical"],
    },
    {
        "name": "Texano Extreme",
        "description": "Três salsichas jumbo, pulled pork desfiado, coleslaw, picles artesanal e molho chipotle defumado.",
        "price": 42.90,
        "image": "/texano_extreme.webp",
        "category": ProductCategory.HOT_DOG.value,
        "tags": ["XL", "Favorito"],
    },
    {
        "name": "Batata Rústica",
        "description": "Batatas em fatias grossas, fritas na hora com casca, temperadas com alecrim e sal marinho.",
        "price": 18.90,
        "image": "/batata_rustica.webp",
        "category": ProductCategory.SIDE_DISH.value,
        "tags": ["Acompanhamento"],
    },
    {
        "name": "Coca-Cola Lata",
        "description": "Refrigerante Coca-Cola original em lata gelada de 350ml.",
        "price": 6.00,
        "image": "/coca_lata.webp",
        "category": ProductCategory.BEVERAGE.value,
        "tags": ["Gelado"],
    },
    {
        "name": "Coca-Cola 2L",
        "description": "Refrigerante Coca-Cola original garrafa de 2 litros.",
        "price": 14.00,
        "image": "/coca_2l.webp",
        "category": ProductCategory.BEVERAGE.value,
        "tags": ["Família"],
    },
    {
        "name": "Guaraná Antarctica Lata",
        "description": "Refrigerante Guaraná Antarctica em lata gelada de 350ml.",
        "price": 5.50,
        "image": "/guarana_lata.webp",
        "category": ProductCategory.BEVERAGE.value,
        "tags": ["Gelado"],
    },
    {
        "name": "Água Mineral 500ml",
        "description": "Água mineral sem gás, garrafa de 500ml.",
        "price": 4.00,
        "image": "/agua_mineral.webp",
        "category": ProductCategory.BEVERAGE.value,
        "tags": ["Natural"],
    },
]
