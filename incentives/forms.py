from django import forms

from incentives.choices import DiscountCodeStatusFilter


class RedeemDiscountCodeForm(forms.Form):
    code = forms.CharField(label="Discount code", max_length=32)

    def clean_code(self):
        return (self.cleaned_data.get("code") or "").strip().upper()


class DiscountCodeFilterForm(forms.Form):
    status = forms.ChoiceField(
        choices=DiscountCodeStatusFilter.choices,
        required=False,
        initial=DiscountCodeStatusFilter.ALL,
    )
    page = forms.IntegerField(min_value=1, required=False, initial=1)
