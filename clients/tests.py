from datetime import date

from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status
from users.models import Role
from .models import Client, Bill
from .utils_invoice import generate_invoice_pdf

User = get_user_model()


class ClientBillingTestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(email='admin@nexbyte.test', password='admin12345')
        self.intern = User.objects.create_user(email='intern@nexbyte.test', password='intern12345', role=Role.INTERN)
        self.acme = Client.objects.create(
            client_name='Acme Ltd',
            contact_person='Jo Doe',
            email='billing@acme.test',
            billing_address='1 Main Street\nLagos',
            payment_terms='Net 30',
        )
        self.bill = Bill.objects.create(
            client=self.acme, amount='1200.00', due_date=date(2026, 12, 1), description='Website build'
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin_user)

    def test_create_client(self):
        response = self.client.post('/api/clients/', {
            'client_name': 'Globex', 'email': 'Accounts@Globex.test'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'accounts@globex.test')
        self.assertTrue(Client.objects.filter(client_name='Globex').exists())

    def test_duplicate_client_email_rejected(self):
        response = self.client.post('/api/clients/', {
            'client_name': 'Acme Again', 'email': 'BILLING@acme.test'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_outstanding_amount(self):
        Bill.objects.create(client=self.acme, amount='300.00', due_date=date(2026, 12, 1), status=Bill.Status.PAID)
        response = self.client.get(f'/api/clients/{self.acme.id}/')
        self.assertEqual(response.data['outstanding'], '1200.00')

    def test_client_with_bills_cannot_be_deleted(self):
        response = self.client.delete(f'/api/clients/{self.acme.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Client.objects.filter(pk=self.acme.pk).exists())

    def test_bill_requires_client(self):
        response = self.client.post('/api/bills/', {'amount': '10.00', 'due_date': '2026-12-01'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('client', response.data)

    def test_bill_amount_must_be_positive(self):
        response = self.client.post('/api/bills/', {
            'client': self.acme.id, 'amount': '0', 'due_date': '2026-12-01'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_bill_returns_resource(self):
        response = self.client.patch(f'/api/bills/{self.bill.id}/', {
            'status': 'paid', 'transaction_id': 'TXN-1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'paid')
        self.assertEqual(response.data['client_name'], 'Acme Ltd')

    def test_filter_bills_by_status(self):
        response = self.client.get('/api/bills/', {'status': 'paid'})
        self.assertEqual(response.data, [])
        response = self.client.get('/api/bills/', {'status': 'unpaid'})
        self.assertEqual(len(response.data), 1)

    def test_invoice_pdf(self):
        self.assertTrue(generate_invoice_pdf(self.bill).startswith(b'%PDF'))

        response = self.client.get(f'/api/bills/{self.bill.id}/invoice/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn(self.bill.invoice_number, response['Content-Disposition'])
        self.assertTrue(b''.join(response.streaming_content).startswith(b'%PDF'))

    def test_billing_is_admin_only(self):
        client = APIClient()
        client.force_authenticate(user=self.intern)
        self.assertEqual(client.get('/api/clients/').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(client.get('/api/bills/').status_code, status.HTTP_403_FORBIDDEN)

    def test_invoice_escapes_markup_characters(self):
        self.acme.client_name = 'Acme & Sons <Intl>'
        self.acme.billing_address = 'Unit <4>\nR&D Park'
        self.acme.gst_number = 'GST<1>'
        self.acme.save()
        self.bill.description = 'fee < 100 for <script>'
        self.bill.save()

        self.assertTrue(generate_invoice_pdf(self.bill).startswith(b'%PDF'))
        response = self.client.get(f'/api/bills/{self.bill.id}/invoice/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_client_list_outstanding_uses_fixed_queries(self):
        def list_queries():
            with CaptureQueriesContext(connection) as ctx:
                response = self.client.get('/api/clients/')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            return response, len(ctx.captured_queries)

        _, single = list_queries()
        for n in range(3):
            other = Client.objects.create(client_name=f'Client {n}', email=f'c{n}@clients.test')
            Bill.objects.create(client=other, amount='50.00', due_date=date(2026, 12, 1))
        response, many = list_queries()

        self.assertEqual(single, many)
        outstanding = {c['client_name']: c['outstanding'] for c in response.data}
        self.assertEqual(outstanding['Acme Ltd'], '1200.00')
        self.assertEqual(outstanding['Client 0'], '50.00')
