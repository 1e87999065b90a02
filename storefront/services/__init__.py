"""Services: catalog/order repositories, checkout, money helpers."""
