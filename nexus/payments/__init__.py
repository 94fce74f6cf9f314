"""Fluxo de pagamento PIX: pedido, cobrança, consulta de status e webhook."""
