"""Placeholder records for the demo dashboard.

Ids are fixed so the dashboard's hard-coded links keep working between
reseeds. Invoices deliberately carry no id. Amounts are in cents.
"""

from dashboard_seed.seed.schemas import CustomerSeed, InvoiceSeed, RevenueSeed, UserSeed

users = [
    UserSeed(
        id="410544b2-4001-4271-9855-fec4b6a6442a",
        name="User",
        email="user@nextmail.com",
        password="123456",
    ),
]

customers = [
    CustomerSeed(
        id="d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
        name="Evil Rabbit",
        email="evil@rabbit.com",
        image_url="/customers/evil-rabbit.png",
    ),
    CustomerSeed(
        id="3958dc9e-712f-4377-85e9-fec4b6a6442a",
        name="Delba de Oliveira",
        email="delba@oliveira.com",
        image_url="/customers/delba-de-oliveira.png",
    ),
    CustomerSeed(
        id="3958dc9e-742f-4377-85e9-fec4b6a6442a",
        name="Lee Robinson",
        email="lee@robinson.com",
        image_url="/customers/lee-robinson.png",
    ),
    CustomerSeed(
        id="76d65c26-f784-44a2-ac19-586678f7c2f2",
        name="Michael Novotny",
        email="michael@novotny.com",
        image_url="/customers/michael-novotny.png",
    ),
    CustomerSeed(
        id="cc27c14a-0acf-4f4a-a6c9-d45682c144b9",
        name="Amy Burns",
        email="amy@burns.com",
        image_url="/customers/amy-burns.png",
    ),
    CustomerSeed(
        id="13d07535-c59e-4157-a011-f8d2ef4e0cbb",
        name="Balazs Orban",
        email="balazs@orban.com",
        image_url="/customers/balazs-orban.png",
    ),
]

invoices = [
    InvoiceSeed(customer_id=customers[0].id, amount=15795, status="pending", date="2022-12-06"),
    InvoiceSeed(customer_id=customers[1].id, amount=20348, status="pending", date="2022-11-14"),
    InvoiceSeed(customer_id=customers[4].id, amount=3040, status="paid", date="2022-10-29"),
    InvoiceSeed(customer_id=customers[3].id, amount=44800, status="paid", date="2023-09-10"),
    InvoiceSeed(customer_id=customers[5].id, amount=34577, status="pending", date="2023-08-05"),
    InvoiceSeed(customer_id=customers[2].id, amount=54246, status="pending", date="2023-07-16"),
    InvoiceSeed(customer_id=customers[0].id, amount=666, status="pending", date="2023-06-27"),
    InvoiceSeed(customer_id=customers[3].id, amount=32545, status="paid", date="2023-06-09"),
    InvoiceSeed(customer_id=customers[4].id, amount=1250, status="paid", date="2023-06-17"),
    InvoiceSeed(customer_id=customers[5].id, amount=8546, status="paid", date="2023-06-07"),
    InvoiceSeed(customer_id=customers[1].id, amount=500, status="paid", date="2023-08-19"),
    InvoiceSeed(customer_id=customers[5].id, amount=8945, status="paid", date="2023-06-03"),
    InvoiceSeed(customer_id=customers[2].id, amount=1000, status="paid", date="2022-06-05"),
]

revenue = [
    RevenueSeed(month="Jan", revenue=2000),
    RevenueSeed(month="Feb", revenue=1800),
    RevenueSeed(month="Mar", revenue=2200),
    RevenueSeed(month="Apr", revenue=2500),
    RevenueSeed(month="May", revenue=2300),
    RevenueSeed(month="Jun", revenue=3200),
    RevenueSeed(month="Jul", revenue=3500),
    RevenueSeed(month="Aug", revenue=3700),
    RevenueSeed(month="Sep", revenue=2500),
    RevenueSeed(month="Oct", revenue=2800),
    RevenueSeed(month="Nov", revenue=3000),
    RevenueSeed(month="Dec", revenue=4800),
]
