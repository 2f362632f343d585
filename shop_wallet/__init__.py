"""Shop wallet: wallet payments, orders and refunds."""
